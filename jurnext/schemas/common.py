from pydantic import BaseModel
from typing import Optional


class PartyInfo(BaseModel):
    """Email and display name snapshot of a customer or vendor."""
    email: str
    name: Optional[str] = None

    class Config:
        from_attributes = True


def party(email: Optional[str], name: Optional[str]) -> Optional[dict]:
    if email is None:
        return None
    return {"email": email, "name": name}

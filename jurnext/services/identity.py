from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional
import logging

from jose import JWTError, jwt
from sqlalchemy.orm import Session
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from jurnext.config import Settings
from jurnext.database import get_db
from jurnext.dependencies import get_app_settings
from jurnext.models.booking import Booking
from jurnext.models.ticket import Ticket
from jurnext.models.user import User, UserRole

logger = logging.getLogger(__name__)
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
    """A verified caller: the email from the bearer token plus the stored role."""
    email: str
    name: Optional[str] = None
    role: UserRole = UserRole.CUSTOMER
    fraud: bool = False


class IdentityVerifier:
    def __init__(self, settings: Settings):
        self.secret = settings.token_secret
        self.algorithm = settings.token_algorithm

    def verify(self, token: str) -> Optional[str]:
        """Return the verified email carried by the token, or None."""
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError as e:
            logger.info(f"Rejected bearer token: {e}")
            return None
        email = payload.get("email")
        if not email:
            return None
        return email

    def issue(self, email: str, expires_delta: Optional[timedelta] = None) -> str:
        expire = datetime.utcnow() + (expires_delta or timedelta(hours=1))
        return jwt.encode({"email": email, "exp": expire}, self.secret, algorithm=self.algorithm)


def load_principal(db: Session, email: str) -> Principal:
    user = db.query(User).filter(User.email == email).first()
    if not user:
        return Principal(email=email)
    return Principal(email=user.email, name=user.name, role=user.role, fraud=bool(user.fraud))


def is_admin(principal: Principal) -> bool:
    return principal.role == UserRole.ADMIN


def is_vendor(principal: Principal) -> bool:
    return principal.role == UserRole.VENDOR


def vendor_owns_ticket(principal: Principal, ticket: Ticket) -> bool:
    return is_vendor(principal) and ticket.vendor_email == principal.email


def vendor_owns_booking(principal: Principal, booking: Booking) -> bool:
    # ownership follows the catalog entry, not the snapshot on the booking
    return booking.ticket is not None and vendor_owns_ticket(principal, booking.ticket)


def customer_owns_booking(principal: Principal, booking: Booking) -> bool:
    return booking.customer_email == principal.email


def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings)
) -> Principal:
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized Access!"
        )

    verifier = IdentityVerifier(settings)
    email = verifier.verify(credentials.credentials)
    if email is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized Access!"
        )

    return load_principal(db, email)


def get_current_admin(
    principal: Principal = Depends(get_current_principal)
) -> Principal:
    if not is_admin(principal):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return principal


def get_current_vendor(
    principal: Principal = Depends(get_current_principal)
) -> Principal:
    if not is_vendor(principal):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Vendor access required"
        )
    return principal

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from jurnext.database import get_db
from jurnext.middleware.security import limiter
from jurnext.schemas.user import UserUpsert, UserResponse, RoleResponse
from jurnext.services.identity import Principal, get_current_principal
from jurnext.services.users import UserService

router = APIRouter(tags=["users"])


@router.post("/user", response_model=UserResponse)
@limiter.limit("10/minute")
async def save_user(
    request: Request,
    user_data: UserUpsert,
    db: Session = Depends(get_db)
):
    return UserService.upsert_user(db, user_data.email, user_data.name, user_data.photo)


@router.get("/user/role", response_model=RoleResponse)
async def get_user_role(
    principal: Principal = Depends(get_current_principal)
):
    return {"role": principal.role}

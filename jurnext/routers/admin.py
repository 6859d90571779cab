from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from jurnext.config import Settings
from jurnext.database import get_db
from jurnext.dependencies import get_app_settings
from jurnext.schemas.ticket import TicketResponse, TicketStatusUpdate, AdvertiseUpdate
from jurnext.schemas.user import UserResponse, RoleUpdate
from jurnext.services.catalog import CatalogService, AdvertiseLimitReached
from jurnext.services.identity import Principal, get_current_admin
from jurnext.services.users import UserService

router = APIRouter(tags=["admin"])


@router.get("/users", response_model=List[UserResponse])
async def list_users(
    admin: Principal = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    return UserService.get_all_users(db)


@router.patch("/update-role", response_model=UserResponse)
async def update_role(
    payload: RoleUpdate,
    admin: Principal = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    if not payload.id:
        raise HTTPException(status_code=400, detail="User ID is required")

    target_user = UserService.get_user_by_id(db, payload.id)
    if not target_user:
        raise HTTPException(status_code=404, detail="User not found")

    return UserService.update_role(db, target_user, payload.role)


@router.patch("/users/mark-fraud/{user_id}", response_model=UserResponse)
async def mark_fraud(
    user_id: int,
    admin: Principal = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    target_user = UserService.get_user_by_id(db, user_id)
    if not target_user:
        raise HTTPException(status_code=404, detail="User not found")

    return UserService.set_fraud(db, target_user, True)


@router.patch("/users/unmark-fraud/{user_id}", response_model=UserResponse)
async def unmark_fraud(
    user_id: int,
    admin: Principal = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    target_user = UserService.get_user_by_id(db, user_id)
    if not target_user:
        raise HTTPException(status_code=404, detail="User not found")

    return UserService.set_fraud(db, target_user, False)


@router.patch("/advertise-ticket/{ticket_id}", response_model=TicketResponse)
async def advertise_ticket(
    ticket_id: int,
    payload: AdvertiseUpdate,
    admin: Principal = Depends(get_current_admin),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings)
):
    ticket = CatalogService.get_ticket(db, ticket_id)
    if not ticket:
        raise HTTPException(status_code=404, detail="Ticket not found")

    try:
        return CatalogService.set_advertise(
            db, ticket, payload.advertise, settings.advertise_limit
        )
    except AdvertiseLimitReached as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/tickets", response_model=List[TicketResponse])
async def list_all_tickets(
    admin: Principal = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    return CatalogService.get_all_tickets(db)


@router.patch("/tickets/{ticket_id}", response_model=TicketResponse)
async def update_ticket_status(
    ticket_id: int,
    payload: TicketStatusUpdate,
    admin: Principal = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    if not CatalogService.set_status(db, ticket_id, payload.status):
        raise HTTPException(status_code=404, detail="Status update failed")

    return CatalogService.get_ticket(db, ticket_id)

from datetime import datetime
from typing import Optional, List
import logging

from sqlalchemy.orm import Session

from jurnext.models.user import User, UserRole

logger = logging.getLogger(__name__)


class UserService:
    @staticmethod
    def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def get_user_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email).first()

    @staticmethod
    def upsert_user(db: Session, email: str, name: Optional[str], photo: Optional[str]) -> User:
        """Insert a new customer, or refresh last_logged_in for a known email."""
        user = UserService.get_user_by_email(db, email)
        now = datetime.utcnow()

        if user:
            user.last_logged_in = now
        else:
            user = User(
                email=email,
                name=name,
                photo=photo,
                role=UserRole.CUSTOMER,
                fraud=False,
                created_at=now,
                last_logged_in=now
            )
            db.add(user)
            logger.info(f"New user {email} registered")

        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def get_all_users(db: Session) -> List[User]:
        return db.query(User).order_by(User.id).all()

    @staticmethod
    def update_role(db: Session, user: User, role: UserRole) -> User:
        user.role = role
        db.commit()
        db.refresh(user)
        logger.info(f"User {user.email} is now {role.value}")
        return user

    @staticmethod
    def set_fraud(db: Session, user: User, fraud: bool) -> User:
        user.fraud = fraud
        db.commit()
        db.refresh(user)
        logger.info(f"User {user.email} fraud flag set to {fraud}")
        return user

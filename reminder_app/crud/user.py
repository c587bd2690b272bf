from typing import Optional
from sqlalchemy.orm import Session
from reminder_app.core.security import get_password_hash, verify_password
from reminder_app.models.user import User
from reminder_app.schemas.user import UserCreate


class CRUDUser:
    def create(self, db: Session, *, obj_in: UserCreate) -> User:
        hashed_password = get_password_hash(obj_in.password)
        db_obj = User(
            email=obj_in.email,
            name=obj_in.name,
            hashed_password=hashed_password,
        )
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def get(self, db: Session, id: int) -> Optional[User]:
        return db.query(User).filter(User.id == id).first()

    def get_by_email(self, db: Session, *, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email).first()

    def authenticate(self, db: Session, *, email: str, password: str) -> Optional[User]:
        user = self.get_by_email(db, email=email)
        if not user:
            return None
        if not verify_password(password, user.hashed_password):
            return None
        return user

    def set_push_token(self, db: Session, *, db_obj: User, push_token: Optional[str]) -> User:
        db_obj.push_token = push_token
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def set_notifications_enabled(self, db: Session, *, db_obj: User, enabled: bool) -> User:
        db_obj.notifications_enabled = enabled
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def is_active(self, user: User) -> bool:
        return user.is_active


# Create instance that can be imported directly
user = CRUDUser()

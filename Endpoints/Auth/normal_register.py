from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from models.userModels import Users, UserRole
from schemas.auth.schemas import CreateUserRequest
from .normal_login import bcrypt_context
import logging

logger = logging.getLogger(__name__)


def register_user(db: Session, create_user_request: CreateUserRequest) -> dict:
    """
    Create a regular user account. The role is always USER; admins are seeded.
    """
    email = create_user_request.email.lower().strip()
    if db.query(Users).filter(Users.email == email).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User Already Exist",
        )

    new_user = Users(
        user_name=create_user_request.userName.strip(),
        email=email,
        password_hash=bcrypt_context.hash(create_user_request.password),
        role=UserRole.USER,
        is_verified=True,
    )
    db.add(new_user)
    db.commit()
    db.refresh(new_user)

    logger.info(f"Registered user {new_user.id}")
    return {
        "success": True,
        "message": "Registered Successfully",
        "user_id": new_user.id,
    }


def ensure_admin(db: Session, email: str, password: str, user_name: str = "Super Admin") -> Users:
    """Create the admin account if it does not exist yet."""
    email = email.lower().strip()
    admin = db.query(Users).filter(Users.email == email).first()
    if admin:
        logger.info("Admin already exists")
        return admin

    admin = Users(
        user_name=user_name,
        email=email,
        password_hash=bcrypt_context.hash(password),
        role=UserRole.ADMIN,
        is_verified=True,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    logger.info(f"Admin created with ID: {admin.id}")
    return admin

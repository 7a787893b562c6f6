from fastapi import APIRouter, HTTPException, status
from db.connection import db_dependency
from db.VerifyToken import user_dependency, admin_dependency
from schemas.auth.schemas import (
    CreateUserRequest, LoginUser, UpdateProfileRequest, ChangePasswordRequest, ProfileResponse
)
from models.userModels import Users, UserRole
from Endpoints.Auth.normal_login import login_for_access_token, bcrypt_context
from Endpoints.Auth.normal_register import register_user
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/user", tags=["Authentication"])


def _load_user(db, user_id: int) -> Users:
    user = db.query(Users).filter(Users.id == user_id).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register_user_route(db: db_dependency, create_user_request: CreateUserRequest):
    return register_user(db, create_user_request)


@router.post(
    "/login",
    summary="User login",
    responses={
        status.HTTP_401_UNAUTHORIZED: {"description": "Invalid credentials"},
        status.HTTP_403_FORBIDDEN: {"description": "Account inactive or wrong role"},
    }
)
def login_route(form_data: LoginUser, db: db_dependency):
    return login_for_access_token(form_data, db)


@router.post("/admin/login", summary="Admin login")
def admin_login_route(form_data: LoginUser, db: db_dependency):
    return login_for_access_token(form_data, db, expected_role=UserRole.ADMIN)


@router.delete("/logout")
def logout_route(db: db_dependency, user: user_dependency):
    account = _load_user(db, user["user_id"])
    account.is_logged_in = False
    db.commit()
    return {"success": True, "message": "Logged out"}


# ------------------ ADMIN PROFILE ------------------

@router.get("/admin/me", response_model=ProfileResponse)
def get_admin_profile(db: db_dependency, admin: admin_dependency):
    return _load_user(db, admin["user_id"])


@router.put("/admin/me", response_model=ProfileResponse)
def update_admin_profile(payload: UpdateProfileRequest, db: db_dependency, admin: admin_dependency):
    account = _load_user(db, admin["user_id"])

    # Update only provided fields
    if payload.userName is not None:
        account.user_name = payload.userName
    if payload.phone is not None:
        account.phone = payload.phone
    if payload.address is not None:
        account.address = payload.address
    if payload.bio is not None:
        account.bio = payload.bio

    db.commit()
    db.refresh(account)
    return account


@router.put("/admin/change-password")
def change_admin_password(payload: ChangePasswordRequest, db: db_dependency, admin: admin_dependency):
    account = _load_user(db, admin["user_id"])

    if not bcrypt_context.verify(payload.currentPassword, account.password_hash):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Wrong password")

    account.password_hash = bcrypt_context.hash(payload.newPassword)
    db.commit()
    logger.info(f"Admin {account.id} changed password")
    return {"success": True, "message": "Password updated"}

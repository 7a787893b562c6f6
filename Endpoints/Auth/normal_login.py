from fastapi import HTTPException, status, Depends
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError, ExpiredSignatureError
from typing import Annotated, Optional
from passlib.context import CryptContext
from sqlalchemy.orm import Session
from models.userModels import Users, UserRole
from schemas.auth.schemas import LoginUser
from functions.generateToken import create_access_token
from functions.settings import get_settings
import logging

logger = logging.getLogger(__name__)

bcrypt_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_bearer = OAuth2PasswordBearer(tokenUrl="user/login")


def authenticate_user(email: str, password: str, db: Session) -> Optional[Users]:
    """
    Authenticate user with email and password.
    """
    user = db.query(Users).filter(Users.email == email.lower().strip()).first()
    if not user:
        return None
    if not bcrypt_context.verify(password, user.password_hash):
        return None
    return user


def login_for_access_token(form_data: LoginUser, db: Session, expected_role: Optional[UserRole] = None) -> dict:
    """
    Check credentials (and role, for the admin login) and issue a bearer token.
    """
    user = authenticate_user(form_data.email, form_data.password, db)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive. Please contact support.",
        )
    if not user.is_verified:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Verify email first",
        )

    if expected_role is not None and user.role != expected_role:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Not authorized as {expected_role.value}",
        )

    token = create_access_token(user_id=user.id, email=user.email, role=user.role.value)
    user.is_logged_in = True
    db.commit()

    logger.info(f"User {user.id} logged in as {user.role.value}")
    return {
        "success": True,
        "accessToken": token,
        "token_type": "bearer",
        "data": {
            "id": user.id,
            "userName": user.user_name,
            "role": user.role.value,
        },
    }


async def get_current_user(token: Annotated[str, Depends(oauth2_bearer)]) -> dict:
    """
    Get current authenticated user from JWT token.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access token expired",
        )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid access token",
        )

    email: str = payload.get("sub")
    role: str = payload.get("role")
    user_id: int = payload.get("id")

    if None in (email, user_id, role):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
        )

    return {
        "email": email,
        "user_id": user_id,
        "role": role,
    }


async def require_admin(user: Annotated[dict, Depends(get_current_user)]) -> dict:
    if user["role"] != UserRole.ADMIN.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not Allowed To Perform This Action",
        )
    return user

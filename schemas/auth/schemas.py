from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from models.userModels import UserRole


class CreateUserRequest(BaseModel):
    """Schema for user registration request"""
    userName: str = Field(..., min_length=1, max_length=250)
    email: EmailStr
    password: str = Field(..., min_length=8)

    class Config:
        json_schema_extra = {
            "example": {
                "userName": "John Doe",
                "email": "john.doe@example.com",
                "password": "SecurePass123",
            }
        }


class LoginUser(BaseModel):
    email: EmailStr
    password: str


class UpdateProfileRequest(BaseModel):
    userName: Optional[str] = Field(None, min_length=1, max_length=250)
    phone: Optional[str] = None
    address: Optional[str] = None
    bio: Optional[str] = None


class ChangePasswordRequest(BaseModel):
    currentPassword: str
    newPassword: str = Field(..., min_length=8)


class ProfileResponse(BaseModel):
    id: int
    user_name: str
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    bio: Optional[str] = None
    profile_photo: Optional[str] = None
    role: UserRole

    class Config:
        from_attributes = True

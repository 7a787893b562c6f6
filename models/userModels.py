from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, Enum
from db.database import Base
from datetime import datetime
import enum


class UserRole(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"


class Users(Base):
    __tablename__ = "users"

    # Primary Identity
    id = Column(Integer, primary_key=True, index=True)

    # Basic Info
    user_name = Column(String(250), nullable=False)
    email = Column(String(220), unique=True, index=True, nullable=False)
    phone = Column(String(50), nullable=True, default="")
    address = Column(Text, nullable=True, default="")
    bio = Column(Text, nullable=True, default="")
    profile_photo = Column(Text, nullable=True, default="")

    # Authentication
    password_hash = Column(Text, nullable=False)

    # Role Management
    role = Column(Enum(UserRole), default=UserRole.USER, nullable=False)
    is_active = Column(Boolean, default=True)
    is_verified = Column(Boolean, default=True)
    is_logged_in = Column(Boolean, default=False)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"

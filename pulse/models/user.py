"""
User Model Module

This module defines the User model and UserRole enumeration for authentication
and authorization throughout the application.
"""
from enum import Enum
from typing import List, Optional
from sqlmodel import SQLModel, Field, JSON, Column
import uuid
from datetime import datetime, timezone


class UserRole(str, Enum):
    """
    Enumeration of user roles defining permission levels in the system.

    Role hierarchy (from least to most privileged):
    - USER: Basic user, owns and analyzes their own projects (default for registration)
    - ADMIN: Administrator, can see and modify every project
    - SUPER_ADMIN: Super administrator with complete system access
    """
    USER = "user"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


class User(SQLModel, table=True):
    """
    User model representing authenticated users in the system.

    Users are identified by UUID and authenticated via email/password. The roles
    field determines their permission level throughout the application.

    Attributes:
        id: Unique identifier (UUID) automatically generated for each user
        email: User's email address, used for authentication (required, unique, indexed)
        password: Hashed password (bcrypt) for authentication
        roles: List of UserRole values assigned to this user (default: [USER])
        full_name: User's full display name
        created_at: ISO timestamp when the user account was created
    """
    __tablename__ = "users"

    # Primary key - auto-generated UUID for global uniqueness
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)

    # Authentication fields
    email: str = Field(unique=True, index=True, nullable=False)
    password: Optional[str] = None  # Hashed password (bcrypt)

    full_name: Optional[str] = None

    # Authorization - stored as JSON array in database
    roles: List[UserRole] = Field(default=[UserRole.USER], sa_column=Column(JSON))

    # Audit timestamp
    created_at: Optional[str] = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    @property
    def is_privileged(self) -> bool:
        """Helper to check if user has admin-level roles."""
        return UserRole.ADMIN in self.roles or UserRole.SUPER_ADMIN in self.roles

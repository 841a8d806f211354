"""
User Entity

Represents an employee, candidate or company account.
"""

from datetime import date, datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel

from src.domain.base import utcnow
from .enums import UserRole


class User(SQLModel, table=True):
    """
    User entity - an account that can submit or receive feedback.

    Business Rules:
    - Email is unique, stored trimmed and lower-cased
    - id_number (national id / tax id) is unique
    - Password stored as bcrypt hash (cost factor 12), never in plain text
    - birth_date is required for employee and candidate accounts
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    id_number: str = Field(unique=True, index=True, max_length=64)
    name: str = Field(max_length=255)
    email: str = Field(unique=True, index=True, max_length=255)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars

    role: UserRole
    birth_date: Optional[date] = None
    description: Optional[str] = Field(default=None, max_length=2000)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    last_login_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

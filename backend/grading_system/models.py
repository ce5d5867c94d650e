"""SQLModel data models.

This module defines the application's database tables using SQLModel.
`Subject` is the managed resource; `User` only backs the optional
token authentication.
"""

from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime, timezone


class Subject(SQLModel, table=True):
    """A subject taught in the grading system.

    `id` is assigned by the database on first insert and never changes
    afterwards. `name` and `code` are free text without constraints.
    """
    id: Optional[int] = Field(default=None, primary_key=True)
    name: Optional[str] = None
    code: Optional[str] = None


class User(SQLModel, table=True):
    """A registered API user.

    Fields:
    - `username`: unique login name
    - `password_hash`: hashed password string (never store plaintext)
    """
    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(index=True, nullable=False, unique=True)
    password_hash: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

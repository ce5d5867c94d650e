"""Pydantic request/response schemas used by the API.

Schemas keep API input/output shapes stable and provide validation for
controller handlers and tests.
"""

from pydantic import BaseModel, Field
from typing import Optional

# ids are stored as signed 64-bit integers
MIN_ID = -(2 ** 63)
MAX_ID = 2 ** 63 - 1


class SubjectDTO(BaseModel):
    """Transport representation of a `Subject`.

    Two DTOs are equal only when both carry the same non-null `id`; a DTO
    without an id is never equal to anything, itself included when
    compared by value. The hash follows `id` alone.
    """
    id: Optional[int] = Field(default=None, ge=MIN_ID, le=MAX_ID)
    name: Optional[str] = None
    code: Optional[str] = None

    def __eq__(self, other):
        if not isinstance(other, SubjectDTO):
            return False
        if self.id is None:
            return False
        return self.id == other.id

    def __hash__(self):
        return hash(self.id)

    def __str__(self):
        return f"SubjectDTO{{id={self.id}, name='{self.name}', code='{self.code}'}}"


class RegisterIn(BaseModel):
    """Payload for user registration/authentication endpoints."""
    username: str
    password: str


class TokenOut(BaseModel):
    """Authentication response containing an access token."""
    access_token: str


class UserOut(BaseModel):
    """Public view of a registered user."""
    id: int
    username: str

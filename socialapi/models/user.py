"""User domain model."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.networks import validate_email

from socialapi.models.validators import check_url

MAX_PASSWORD_BYTES = 72


class User(BaseModel):
    """A registered account.

    ``password`` holds the plain password while registering, the bcrypt hash
    once persisted, and the empty string on anything returned to callers.
    """

    model_config = ConfigDict(from_attributes=True)

    id: Optional[str] = None
    name: str = Field(..., min_length=1, max_length=100)
    username: str = Field(..., min_length=3, max_length=50, pattern=r"^[A-Za-z0-9]+$")
    email: str
    password: str = Field(..., min_length=6)
    bio: Optional[str] = Field(None, max_length=500)
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("email")
    @classmethod
    def _email_is_valid(cls, v: str) -> str:
        # Stored exactly as given so login lookups match what was registered
        validate_email(v)
        return v

    @field_validator("password")
    @classmethod
    def _password_fits_bcrypt(cls, v: str) -> str:
        # bcrypt only accepts the first 72 bytes of input
        if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
        return v

    @field_validator("image_url")
    @classmethod
    def _image_url_is_url(cls, v: Optional[str]) -> Optional[str]:
        return check_url(v)

    def sanitized(self) -> "User":
        """Copy with the password field cleared."""
        return self.model_copy(update={"password": ""})

"""Pydantic models for request bodies."""

from pydantic import BaseModel, Field, field_validator

from munchboxd.domain.models import normalize_username


class SignInRequest(BaseModel):
    """Email and password sign-in payload."""

    email: str
    password: str = Field(min_length=6)


class SignUpRequest(SignInRequest):
    """Sign-up payload with the chosen username."""

    username: str = Field(min_length=1)

    @field_validator("username")
    @classmethod
    def _normalize_username(cls, value: str) -> str:
        return normalize_username(value)


class FormUpdate(BaseModel):
    """Partial edit of the combo form; unset fields are left alone."""

    strain_name: str | None = None
    product_type: str | None = None
    brand: str | None = None
    high_rating: int | None = Field(default=None, ge=1, le=5)
    food_name: str | None = None
    source_type: str | None = None
    munchie_rating: int | None = Field(default=None, ge=1, le=5)
    description: str | None = None

    def changes(self) -> dict[str, object]:
        return self.model_dump(exclude_unset=True, exclude_none=True)

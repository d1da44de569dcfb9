"""Auth domain type definitions for type safety."""

from typing import Optional

from pydantic import BaseModel, Field


class IdentityTokenPayload(BaseModel):
    """Identity token payload structure."""

    # Standard JWT claims
    sub: Optional[str] = Field(None, description="Subject (user ID)")
    iss: Optional[str] = Field(None, description="Token issuer")
    aud: Optional[str | list[str]] = Field(None, description="Token audience")
    exp: Optional[int] = Field(None, description="Expiration timestamp")
    iat: Optional[int] = Field(None, description="Issued at timestamp")

    # Profile claims
    email: Optional[str] = Field(None, description="User email address")
    email_verified: Optional[bool] = Field(
        None, description="Whether email is verified"
    )
    name: Optional[str] = Field(None, description="Display name")

    model_config = {"extra": "allow"}

    @property
    def lookup_email(self) -> Optional[str]:
        return self.email or self.sub

from __future__ import annotations

from pydantic import Field

from .common import CamelModel


class TokenPair(CamelModel):
    """Access and refresh tokens."""
    token_type: str = Field("bearer", description="Token type, typically 'bearer'")
    access_token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., description="JWT refresh token")


class RefreshRequest(CamelModel):
    """Request to refresh an access token."""
    refresh_token: str = Field(..., description="Refresh token")

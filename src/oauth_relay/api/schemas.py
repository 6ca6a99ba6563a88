from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class BaseSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


#           AUTH
# ---------------------------


class TokenResponse(BaseSchema):
    """Public view of the session returned by /auth/token."""

    app: str
    token_type: str = Field(default="Bearer", alias="tokenType")
    access_token: str = Field(alias="accessToken")
    expires_at: int = Field(alias="expiresAt")
    scope: Optional[str] = None
    organization_uid: Optional[str] = Field(default=None, alias="organizationUid")
    location: Optional[str] = None


class InstallResponse(BaseSchema):
    ok: bool = True
    installation_uid: str
    region: str
    app: str
    authorization_type: Literal["app"] = "app"


class LogoutResponse(BaseSchema):
    ok: bool = True


#           HEALTH
# ---------------------------


class HealthResponse(BaseSchema):
    """Health check response."""

    status: str = "healthy"
    name: str
    version: str
    environment: str
    tenants: int
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


#           ERROR
# ---------------------------


class ErrorResponse(BaseSchema):
    """Error body; extra keys such as ``allowed`` or ``missing`` may follow."""

    model_config = ConfigDict(extra="allow")

    error: str

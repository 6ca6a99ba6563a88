from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AuthorizationKind(str, Enum):
    USER = "user"
    APP = "app"


class TenantConfig(BaseModel):
    """Provider and client credentials for one tenant label."""

    model_config = ConfigDict(frozen=True)

    label: str
    region: str
    app_uid: str
    client_id: str
    client_secret: str
    redirect_uri: str
    scope: str = ""


#          Cookie payloads
# ------------------------------------------


class PendingAuth(BaseModel):
    """
    Material carried between /auth/start and /auth/callback.

    Serialized with its wire names: {state, codeVerifier, app, t}.
    ``t`` is the creation time in epoch milliseconds.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    state: str = Field(min_length=1)
    code_verifier: str = Field(alias="codeVerifier", min_length=1)
    app: str = Field(min_length=1)
    t: int


class Session(BaseModel):
    """Token material held inside the encrypted ``oauth_token`` cookie."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    app: str
    access_token: str = Field(alias="accessToken")
    refresh_token: Optional[str] = Field(default=None, alias="refreshToken")
    token_type: str = Field(default="Bearer", alias="tokenType")
    scope: Optional[str] = None
    expires_at: int = Field(alias="expiresAt")
    obtained_at: int = Field(alias="obtainedAt")
    authorization_kind: AuthorizationKind = Field(
        default=AuthorizationKind.USER, alias="authorizationKind"
    )
    organization_uid: Optional[str] = Field(default=None, alias="organizationUid")
    location: Optional[str] = None

    def to_claims(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


#          Provider responses
# ------------------------------------------


class TokenGrant(BaseModel):
    """A successful response from the provider token endpoint."""

    model_config = ConfigDict(extra="ignore")

    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    token_type: Optional[str] = None
    scope: Optional[str] = None
    expires_in: Optional[int] = None
    organization_uid: Optional[str] = None
    location: Optional[str] = None

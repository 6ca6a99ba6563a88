from .config import (
    AppSettings,
    TenantSettings,
    CookieSettings,
    CORSSettings,
    ProviderSettings,
    get_settings,
)

__all__ = [
    "AppSettings",
    "TenantSettings",
    "CookieSettings",
    "CORSSettings",
    "ProviderSettings",
    "get_settings",
]

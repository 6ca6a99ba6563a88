from .client import DEFAULT_BASE_URL, ProviderClient

__all__ = ["DEFAULT_BASE_URL", "ProviderClient"]

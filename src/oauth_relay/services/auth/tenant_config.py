"""
Tenant registry.

Maps an opaque tenant label (``?app=``) to a validated TenantConfig built from
``{PREFIX}_{KEY}`` entries of an immutable key/value store. The store is a
snapshot of the process environment (overlaid on .env values) taken once at
startup.
"""

import logging
import os
import re
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional

from dotenv import dotenv_values

from oauth_relay.exceptions import ConfigurationError
from oauth_relay.schemas import TenantConfig

logger = logging.getLogger(__name__)

REQUIRED_KEYS = (
    "CONTENTSTACK_REGION",
    "CONTENTSTACK_APP_UID",
    "OAUTH_CLIENT_ID",
    "OAUTH_CLIENT_SECRET",
    "OAUTH_REDIRECT_URI",
)
OPTIONAL_KEYS = ("OAUTH_SCOPE",)


def label_prefix(label: str) -> str:
    """``acme-eu`` -> ``ACME_EU``"""
    return re.sub(r"[^A-Z0-9]", "_", label.upper())


class TenantRegistry:
    def __init__(self, labels: Iterable[str], store: Mapping[str, str]):
        self._labels = tuple(label for label in labels if label)
        self._store = MappingProxyType(dict(store))

    @classmethod
    def from_environment(
        cls, labels: Iterable[str], env_file: Optional[str] = ".env"
    ) -> "TenantRegistry":
        store = {}
        if env_file and os.path.exists(env_file):
            store.update(
                {k: v for k, v in dotenv_values(env_file).items() if v is not None}
            )
        store.update(os.environ)
        registry = cls(labels, store)
        logger.info(
            "Tenant registry loaded",
            extra={"tenant_labels": list(registry.labels)},
        )
        return registry

    @property
    def labels(self) -> List[str]:
        return list(self._labels)

    def resolve_label(self, requested: Optional[str] = None) -> Optional[str]:
        """
        Pick the tenant label for an interactive request.

        A supplied label must be known. Without one, the only configured
        label is used; with several configured labels the caller must choose.
        """
        if requested:
            return requested if requested in self._labels else None
        if len(self._labels) == 1:
            return self._labels[0]
        return None

    def default_install_label(self) -> Optional[str]:
        return self._labels[0] if self._labels else None

    def resolve_install_label(self, requested: Optional[str] = None) -> str:
        """Installation callbacks fall back to the first configured label."""
        if requested and requested in self._labels:
            return requested
        label = self.default_install_label()
        if not label:
            raise ConfigurationError("No default app label configured (APP_LABELS)")
        return label

    def get_config(self, label: str) -> TenantConfig:
        prefix = label_prefix(label)
        values = {
            key: (self._store.get(f"{prefix}_{key}") or "").strip()
            for key in REQUIRED_KEYS + OPTIONAL_KEYS
        }

        missing = [f"{prefix}_{key}" for key in REQUIRED_KEYS if not values[key]]
        if missing:
            raise ConfigurationError(
                f"Missing env for app '{label}': {', '.join(missing)}",
                details={"missing": missing},
            )

        return TenantConfig(
            label=label,
            region=values["CONTENTSTACK_REGION"],
            app_uid=values["CONTENTSTACK_APP_UID"],
            client_id=values["OAUTH_CLIENT_ID"],
            client_secret=values["OAUTH_CLIENT_SECRET"],
            redirect_uri=values["OAUTH_REDIRECT_URI"],
            scope=values["OAUTH_SCOPE"],
        )

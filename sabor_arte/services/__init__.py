"""
                        Services Module

External collaborators of the storefront, each with a Mock (development)
and a real (production) implementation.

Services:
    - auth: Supabase Auth credential issuing and token lookup
    - store: Row-oriented persistence (Supabase Postgres)
"""

import logging
from dataclasses import dataclass

from sabor_arte.core.config import Settings
from sabor_arte.core.exceptions import ConfigurationError
from sabor_arte.services.auth import BaseAuthService, build_auth_service
from sabor_arte.services.store import BaseRowStore, build_row_store

logger = logging.getLogger(__name__)


@dataclass
class BackendServices:
    """The collaborators handed to every flow, built once per process."""
    auth: BaseAuthService
    store: BaseRowStore

    async def prepare(self) -> None:
        await self.store.prepare()

    async def close(self) -> None:
        await self.auth.close()
        await self.store.close()


def build_services(settings: Settings) -> BackendServices:
    """
    Build auth and store for the configured environment.

    Raises:
        ConfigurationError: If real services are selected and required
            settings are missing
    """
    missing = settings.validate_production_config()
    if missing:
        raise ConfigurationError(
            f"Missing required configuration for {settings.env_mode.value} mode: "
            f"{', '.join(missing)}"
        )

    return BackendServices(
        auth=build_auth_service(settings),
        store=build_row_store(settings),
    )


__all__ = ["BackendServices", "build_services"]

"""Factory helpers for constructing the distribution service from configuration."""
from __future__ import annotations

from .config import DistributorSettings
from .distribution.service import DistributionService
from .roster import StaticRosterProvider
from .store import DistributionStore, InMemoryDistributionStore, JsonDistributionStore


def build_store(settings: DistributorSettings) -> DistributionStore:
    """Return a JSON directory store when ``store_path`` is set, else an in-memory one."""

    if settings.store_path is not None:
        return JsonDistributionStore(settings.store_path)
    return InMemoryDistributionStore()


def build_roster(settings: DistributorSettings) -> StaticRosterProvider:
    return StaticRosterProvider(settings.agents)


def build_service(settings: DistributorSettings) -> DistributionService:
    return DistributionService(
        build_roster(settings),
        build_store(settings),
        max_upload_bytes=settings.max_upload_bytes,
    )

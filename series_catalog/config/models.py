"""Typed dataclasses describing catalog editor configuration."""

from __future__ import annotations

import dataclasses as dc

from ..fetcher import DEFAULT_FALLBACK, FailurePolicy, FallbackDataset


class CatalogConfigError(ValueError):
    """Raised when the catalog configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class ApiConfig:
    """Endpoint URLs and transport settings for the content API."""

    header_api: str
    page_api: str
    update_comp_api: str
    insert_series_api: str | None = None
    timeout: float = 10.0


@dc.dataclass(slots=True)
class CatalogConfig:
    """Aggregate configuration loaded from ``catalog.yaml``."""

    api: ApiConfig
    failure_policy: FailurePolicy = FailurePolicy.PROPAGATE
    fallback: FallbackDataset = DEFAULT_FALLBACK


__all__ = ["ApiConfig", "CatalogConfig", "CatalogConfigError"]

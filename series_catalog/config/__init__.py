"""Load and validate the catalog editor's YAML configuration.

This subpackage parses ``catalog.yaml``: the content API endpoints, the
default failure policy for section and component fetches, and an optional
fallback dataset served when a fail-open fetch cannot reach the backend. The
primary entry point is :func:`load_catalog_config`.

Examples
--------
>>> from pathlib import Path
>>> from series_catalog.config import load_catalog_config
>>> config = load_catalog_config(Path("config/catalog.yaml"))  # doctest: +SKIP
>>> config.api.page_api  # doctest: +SKIP
'https://cms.example.com/api/page'
"""

from .loader import load_catalog_config
from .models import ApiConfig, CatalogConfig, CatalogConfigError

__all__ = [
    "ApiConfig",
    "CatalogConfig",
    "CatalogConfigError",
    "load_catalog_config",
]

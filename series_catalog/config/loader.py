"""Load catalog editor configuration YAML into typed dataclasses."""

from __future__ import annotations

import collections.abc as cabc
import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from ..fetcher import DEFAULT_FALLBACK, FailurePolicy, FallbackDataset
from ..models import (
    Catalog,
    CatalogIntegrityError,
    ComponentItem,
    Section,
    Series,
    check_integrity,
)
from .models import ApiConfig, CatalogConfig, CatalogConfigError

_REQUIRED_ENDPOINTS = ("header_api", "page_api", "update_comp_api")


def load_catalog_config(path: Path) -> CatalogConfig:
    """Load the YAML configuration describing endpoints and fetch behaviour.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file (for example,
        ``config/catalog.yaml``).

    Returns
    -------
    CatalogConfig
        Parsed configuration with API endpoints, the default fetch failure
        policy, and the fallback dataset (the built-in one when the file
        defines none).

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    TypeError
        If the top-level YAML structure is not a mapping.
    CatalogConfigError
        If endpoints are missing, the failure policy is unknown, or the
        fallback dataset is malformed.

    Examples
    --------
    >>> from pathlib import Path
    >>> config = load_catalog_config(Path("config/catalog.yaml"))  # doctest: +SKIP
    >>> config.failure_policy  # doctest: +SKIP
    <FailurePolicy.FALLBACK: 'fallback'>
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    raw: dict[str, typ.Any] = dict(loaded)

    api = _build_api_config(raw.get("api") or {})
    defaults = raw.get("defaults") or {}
    failure_policy = _parse_policy(defaults.get("failure_policy"))
    fallback_raw = raw.get("fallback")
    fallback = _build_fallback(fallback_raw) if fallback_raw else DEFAULT_FALLBACK

    return CatalogConfig(api=api, failure_policy=failure_policy, fallback=fallback)


def _build_api_config(payload: cabc.Mapping[str, typ.Any]) -> ApiConfig:
    missing = [key for key in _REQUIRED_ENDPOINTS if not payload.get(key)]
    if missing:
        msg = f"Missing API endpoint(s) in configuration: {', '.join(missing)}"
        raise CatalogConfigError(msg)
    timeout = payload.get("timeout", 10.0)
    try:
        timeout = float(timeout)
    except (TypeError, ValueError) as exc:
        msg = f"API timeout must be a number, got {timeout!r}"
        raise CatalogConfigError(msg) from exc
    insert_api = payload.get("insert_series_api")
    return ApiConfig(
        header_api=str(payload["header_api"]),
        page_api=str(payload["page_api"]),
        update_comp_api=str(payload["update_comp_api"]),
        insert_series_api=str(insert_api) if insert_api else None,
        timeout=timeout,
    )


def _parse_policy(value: object) -> FailurePolicy:
    if value is None:
        return FailurePolicy.PROPAGATE
    try:
        return FailurePolicy(str(value).strip().lower())
    except ValueError as exc:
        choices = ", ".join(policy.value for policy in FailurePolicy)
        msg = f"Unknown failure_policy {value!r}; expected one of: {choices}"
        raise CatalogConfigError(msg) from exc


def _build_fallback(payload: object) -> FallbackDataset:
    if not isinstance(payload, cabc.Mapping):
        msg = "'fallback' must be a mapping with 'sections' and 'components'"
        raise CatalogConfigError(msg)

    sections: list[Section] = []
    for entry in payload.get("sections") or []:
        if not isinstance(entry, cabc.Mapping) or not entry.get("id"):
            msg = f"Fallback section entries need an 'id': {entry!r}"
            raise CatalogConfigError(msg)
        section_id = str(entry["id"])
        sections.append(Section(id=section_id, name=str(entry.get("name") or section_id)))

    components: dict[str, tuple[ComponentItem, ...]] = {}
    components_raw = payload.get("components") or {}
    if not isinstance(components_raw, cabc.Mapping):
        msg = "'fallback.components' must map section ids to component lists"
        raise CatalogConfigError(msg)
    for section_id, entries in components_raw.items():
        items = tuple(
            _build_fallback_component(str(section_id), entry)
            for entry in entries or []
        )
        try:
            check_integrity(Catalog(section_id=str(section_id), components=items))
        except CatalogIntegrityError as exc:
            msg = f"Invalid fallback components for '{section_id}': {exc}"
            raise CatalogConfigError(msg) from exc
        components[str(section_id)] = items

    return FallbackDataset(sections=tuple(sections), components=components)


def _build_fallback_component(section_id: str, payload: object) -> ComponentItem:
    match payload:
        case {"id": component_id, **rest} if component_id:
            series = tuple(
                Series(
                    id=str(entry["id"]),
                    title=entry.get("title"),
                    media_url=entry.get("media_url"),
                )
                for entry in rest.get("series") or []
                if isinstance(entry, cabc.Mapping) and entry.get("id")
            )
            return ComponentItem(
                id=str(component_id),
                name=str(rest.get("name") or component_id),
                section_id=section_id,
                tag=rest.get("tag"),
                series=series,
            )
        case _:
            msg = f"Fallback component entries need an 'id': {payload!r}"
            raise CatalogConfigError(msg)


__all__ = ["load_catalog_config"]

r"""Tagged union over the raw component shapes served by the content API.

The content backend embeds a component's series in a different place for
each ``componentKey``. :func:`parse_raw_component` reads one decoded JSON
record and returns the variant that matches its key, keeping only the fields
that variant's extraction rule needs. Records with an unrecognised key become
:class:`UnknownComponent` instead of failing.

Example
-------
>>> from series_catalog.raw_components import parse_raw_component
>>> raw = parse_raw_component({"_id": "c1", "componentKey": "full-size-banner",
...                            "media": {"mediaUrl": "https://cdn.invalid/a.png"}})
>>> type(raw).__name__, raw.media_url
('BannerComponent', 'https://cdn.invalid/a.png')
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import typing as typ

from ._constants import (
    ACTION_BUTTON_KEY,
    BANNER_KEYS,
    CARD_KEYS,
    FEATURE_BANNER_KEY,
    OID_KEY,
)


@dc.dataclass(frozen=True, slots=True)
class _RawBase:
    id: str
    component_key: str
    title: str | None = None
    tag_name: str | None = None


@dc.dataclass(frozen=True, slots=True)
class BannerComponent(_RawBase):
    """A banner whose single embedded media object is its only series."""

    media_url: str | None = None
    media_title: str | None = None


@dc.dataclass(frozen=True, slots=True)
class ActionButtonItem:
    """One button entry from ``interactionData.items``."""

    title: str | None = None
    media_url: str | None = None


@dc.dataclass(frozen=True, slots=True)
class ActionButtonComponent(_RawBase):
    """A learn-action-button component listing interaction items."""

    items: tuple[ActionButtonItem, ...] = ()


@dc.dataclass(frozen=True, slots=True)
class CardEntry:
    """One ``actionData`` entry of a card-style component.

    ``task_id`` comes from ``taskDetail._id``; ``process_id`` is the older
    top-level ``processId`` field some payloads still carry.
    """

    task_id: str | None = None
    process_id: str | None = None
    title: str | None = None
    thumbnail: str | None = None


@dc.dataclass(frozen=True, slots=True)
class CardComponent(_RawBase):
    """A course, continue-watching, or upcoming series card rail."""

    entries: tuple[CardEntry, ...] = ()


@dc.dataclass(frozen=True, slots=True)
class FeatureMedia:
    """One ``media`` entry of an advertisement feature banner."""

    media_id: str | None = None
    media_url: str | None = None
    title: str | None = None


@dc.dataclass(frozen=True, slots=True)
class FeatureBannerComponent(_RawBase):
    """An advertisement feature banner carrying a list of media."""

    media: tuple[FeatureMedia, ...] = ()


@dc.dataclass(frozen=True, slots=True)
class UnknownComponent(_RawBase):
    """A component kind this package has no series extraction rule for."""


RawComponent = (
    BannerComponent
    | ActionButtonComponent
    | CardComponent
    | FeatureBannerComponent
    | UnknownComponent
)


def parse_raw_component(payload: cabc.Mapping[str, typ.Any]) -> RawComponent:
    """Return the tagged variant for one decoded component record.

    Parameters
    ----------
    payload : Mapping[str, Any]
        A single entry of ``data.components`` from the page endpoint.

    Returns
    -------
    RawComponent
        The variant selected by ``componentKey``. Unrecognised or missing
        keys produce :class:`UnknownComponent`.
    """
    key = _optional_str(payload.get("componentKey")) or ""
    base = {
        "id": coerce_id(payload.get("_id")) or "",
        "component_key": key,
        "title": _optional_str(payload.get("title")),
        "tag_name": _tag_name(payload.get("tag")),
    }

    if key in BANNER_KEYS:
        media = _mapping(payload.get("media"))
        return BannerComponent(
            **base,
            media_url=_optional_str(media.get("mediaUrl")),
            media_title=_optional_str(media.get("title")),
        )
    if key == ACTION_BUTTON_KEY:
        interaction = _mapping(payload.get("interactionData"))
        items = tuple(
            _parse_action_item(item) for item in _sequence(interaction.get("items"))
        )
        return ActionButtonComponent(**base, items=items)
    if key in CARD_KEYS:
        entries = tuple(
            _parse_card_entry(entry) for entry in _sequence(payload.get("actionData"))
        )
        return CardComponent(**base, entries=entries)
    if key == FEATURE_BANNER_KEY:
        media_entries = tuple(
            _parse_feature_media(entry) for entry in _sequence(payload.get("media"))
        )
        return FeatureBannerComponent(**base, media=media_entries)
    return UnknownComponent(**base)


def coerce_id(value: object) -> str | None:
    """Return an identifier string from a bare value or ``{"$oid": ...}``."""
    if isinstance(value, cabc.Mapping):
        value = value.get(OID_KEY)
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip()
    return text or None


def _parse_action_item(value: object) -> ActionButtonItem:
    item = _mapping(value)
    button = _mapping(item.get("button"))
    media_url = None
    for media in _sequence(button.get("media")):
        media_url = _optional_str(_mapping(media).get("mediaUrl"))
        break
    return ActionButtonItem(
        title=_optional_str(item.get("title")) or _optional_str(button.get("title")),
        media_url=media_url,
    )


def _parse_card_entry(value: object) -> CardEntry:
    entry = _mapping(value)
    task = _mapping(entry.get("taskDetail"))
    return CardEntry(
        task_id=coerce_id(task.get("_id")),
        process_id=coerce_id(entry.get("processId")),
        title=_optional_str(entry.get("title")) or _optional_str(task.get("title")),
        thumbnail=_optional_str(entry.get("thumbnail")),
    )


def _parse_feature_media(value: object) -> FeatureMedia:
    media = _mapping(value)
    return FeatureMedia(
        media_id=coerce_id(media.get("mediaId")),
        media_url=_optional_str(media.get("mediaUrl")),
        title=_optional_str(media.get("title")),
    )


def _tag_name(value: object) -> str | None:
    match value:
        case cabc.Mapping():
            return _optional_str(value.get("tagName"))
        case str():
            return _optional_str(value)
        case _:
            return None


def _mapping(value: object) -> cabc.Mapping[str, typ.Any]:
    if isinstance(value, cabc.Mapping):
        return value
    return {}


def _sequence(value: object) -> list[typ.Any]:
    if isinstance(value, list | tuple):
        return list(value)
    return []


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


__all__ = [
    "ActionButtonComponent",
    "ActionButtonItem",
    "BannerComponent",
    "CardComponent",
    "CardEntry",
    "FeatureBannerComponent",
    "FeatureMedia",
    "RawComponent",
    "UnknownComponent",
    "coerce_id",
    "parse_raw_component",
]

"""Unit tests for component normalization."""

from __future__ import annotations

import pytest

from series_catalog.models import Series
from series_catalog.normalizer import normalize
from series_catalog.raw_components import (
    CardComponent,
    UnknownComponent,
    parse_raw_component,
)


def test_feature_banner_series_pair_with_media_entries() -> None:
    """Each media entry should become one series with its id and URL."""
    media = [
        {"mediaId": f"m{index}", "mediaUrl": f"https://cdn.invalid/{index}.png"}
        for index in range(4)
    ]
    item = normalize(
        {
            "_id": "feat",
            "componentKey": "advertisement-feature-banner",
            "title": "Featured",
            "media": media,
        },
        "home",
    )

    assert len(item.series) == len(media), (
        f"expected {len(media)} series, got {len(item.series)}"
    )
    for entry, source in zip(item.series, media, strict=True):
        assert entry.id == source["mediaId"]
        assert entry.media_url == source["mediaUrl"]


@pytest.mark.parametrize("key", ["brand-new-widget", "", "hero-carousel"])
def test_unknown_keys_degrade_to_empty_series(key: str) -> None:
    """Unrecognised kinds must not fail and should be named after their key."""
    item = normalize(
        {"_id": "x1", "componentKey": key, "actionData": [{"processId": "p"}]},
        "home",
    )

    assert item.series == (), f"expected no series for {key!r}, got {item.series!r}"
    assert item.name == key, f"expected name {key!r}, got {item.name!r}"
    assert isinstance(parse_raw_component({"componentKey": key}), UnknownComponent)


@pytest.mark.parametrize("key", ["single-ad-banner", "full-size-banner"])
def test_banner_uses_component_id_for_its_single_series(key: str) -> None:
    item = normalize(
        {
            "_id": {"$oid": "64f0c0ffee"},
            "componentKey": key,
            "title": "Summer sale",
            "tag": {"tagName": "promo"},
            "media": {"mediaUrl": "https://cdn.invalid/banner.jpg"},
        },
        "home",
    )

    assert item.id == "64f0c0ffee", "expected $oid envelope to be unwrapped"
    assert item.name == "Summer sale"
    assert item.tag == "promo"
    assert item.series == (
        Series(id="64f0c0ffee", media_url="https://cdn.invalid/banner.jpg"),
    )


def test_banner_without_media_keeps_series_without_url() -> None:
    item = normalize({"_id": "b1", "componentKey": "full-size-banner"}, "home")

    assert item.series == (Series(id="b1"),)


def test_action_button_ids_are_list_positions() -> None:
    """Learn-action-button items are identified by their zero-based index."""
    item = normalize(
        {
            "_id": "btn",
            "componentKey": "learn-action-button",
            "interactionData": {
                "items": [
                    {
                        "title": "Start",
                        "button": {
                            "media": [
                                {"mediaUrl": "https://cdn.invalid/first.png"},
                                {"mediaUrl": "https://cdn.invalid/second.png"},
                            ]
                        },
                    },
                    {"button": {"media": []}},
                    {},
                ]
            },
        },
        "home",
    )

    assert [entry.id for entry in item.series] == ["0", "1", "2"]
    assert item.series[0].media_url == "https://cdn.invalid/first.png", (
        "expected the first button media entry to be used"
    )
    assert item.series[0].title == "Start"
    assert item.series[1].media_url is None
    assert item.series[2].title is None


@pytest.mark.parametrize(
    "key", ["course-series-card", "continue-watching", "upcoming-series-card"]
)
def test_card_ids_prefer_task_detail_over_process_id(key: str) -> None:
    item = normalize(
        {
            "_id": "rail",
            "componentKey": key,
            "actionData": [
                {
                    "taskDetail": {"_id": "task-1"},
                    "processId": "proc-1",
                    "thumbnail": "https://cdn.invalid/t1.jpg",
                },
                {"processId": "proc-2"},
                {"title": "orphan"},
            ],
        },
        "home",
    )

    assert [entry.id for entry in item.series] == ["task-1", "proc-2"], (
        "expected taskDetail._id first, processId as fallback, entries "
        "without either dropped"
    )
    assert item.series[0].media_url == "https://cdn.invalid/t1.jpg"
    assert item.series[1].media_url is None


def test_repeated_series_ids_keep_first_occurrence() -> None:
    raw = parse_raw_component(
        {
            "_id": "rail",
            "componentKey": "continue-watching",
            "actionData": [
                {"taskDetail": {"_id": "t"}, "title": "first"},
                {"taskDetail": {"_id": "t"}, "title": "second"},
            ],
        }
    )
    assert isinstance(raw, CardComponent)

    item = normalize(raw, "home")

    assert [entry.title for entry in item.series] == ["first"]


def test_base_fields_and_section() -> None:
    item = normalize(
        {"_id": 42, "componentKey": "continue-watching", "tag": None},
        "kids",
    )

    assert item.id == "42"
    assert item.name == "continue-watching", "expected key as name fallback"
    assert item.tag is None
    assert item.section_id == "kids"


def test_feature_media_without_id_is_skipped_with_warning(
    caplog: pytest.LogCaptureFixture,
) -> None:
    raw = {
        "_id": "feature",
        "componentKey": "advertisement-feature-banner",
        "media": [
            {"mediaId": "m1", "mediaUrl": "https://cdn.invalid/1.png"},
            {"mediaUrl": "https://cdn.invalid/orphan.png"},
        ],
    }

    with caplog.at_level("WARNING", logger="series_catalog.normalizer"):
        item = normalize(raw, "home")

    assert item.series_ids() == ["m1"]
    assert "without a mediaId in 'feature'" in caplog.text, (
        "expected dropped media entries to be logged"
    )

"""Common literal values used across series_catalog.

These constants keep component discriminators and wire keys centralized so
the normalizer, commit builder, and tests import the same values without
drifting. Intended for internal use within the series_catalog package.

Examples
--------
>>> from series_catalog import _constants
>>> _constants.OID_KEY
'$oid'
>>> "continue-watching" in _constants.CARD_KEYS
True
"""

BANNER_KEYS = frozenset({"single-ad-banner", "full-size-banner"})
ACTION_BUTTON_KEY = "learn-action-button"
CARD_KEYS = frozenset(
    {"course-series-card", "continue-watching", "upcoming-series-card"}
)
FEATURE_BANNER_KEY = "advertisement-feature-banner"

OID_KEY = "$oid"
JSON_MEDIA_TYPE = "application/json"
USER_AGENT = "series-catalog/0.1"

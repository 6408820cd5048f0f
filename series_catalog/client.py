r"""HTTP client for the content-management endpoints.

This module wraps the three endpoints the catalog editor talks to: the
header endpoint listing section tabs, the page endpoint listing a section's
raw components, and the update endpoint accepting a new component order. A
fourth, optional endpoint receives series insertions. The client centralises
authentication, timeouts, and error handling; it returns decoded JSON and
leaves interpretation to :mod:`series_catalog.fetcher`.

Example
-------
>>> from series_catalog.client import CatalogApiClient
>>> client = CatalogApiClient(
...     header_api="https://cms.invalid/header",
...     page_api="https://cms.invalid/page",
...     update_comp_api="https://cms.invalid/update",
...     token="example",
... )  # doctest: +SKIP
>>> client.fetch_tabs()[0]["name"]  # doctest: +SKIP
'Singing'
"""

from __future__ import annotations

import collections.abc as cabc
import json
import logging
import typing as typ
from http import HTTPStatus

import requests

from ._constants import JSON_MEDIA_TYPE, USER_AGENT

logger = logging.getLogger(__name__)


class CatalogApiError(RuntimeError):
    """Raised when the content API cannot be reached or returns an error."""


class CatalogShapeError(CatalogApiError):
    """Raised when a content API response does not have the expected shape."""


class CatalogApiClient:
    """Thin wrapper around the content-management REST endpoints.

    The client does not retry failed requests and never coalesces them; each
    call is a single round trip.
    """

    def __init__(
        self,
        *,
        header_api: str,
        page_api: str,
        update_comp_api: str,
        insert_series_api: str | None = None,
        token: str | None = None,
        session: requests.Session | None = None,
        timeout: float = 10.0,
    ) -> None:
        """Initialise the client with endpoint URLs and optional credentials.

        Parameters
        ----------
        header_api : str
            URL returning ``{"data": {"tabs": [...]}}``.
        page_api : str
            Base URL; ``<page_api>/<sectionId>`` returns the section's
            components.
        update_comp_api : str
            Base URL; ``<update_comp_api>/<sectionId>`` accepts order commits.
        insert_series_api : str or None, optional
            Base URL accepting series insertions. Insertions raise
            :class:`CatalogApiError` when it is not configured.
        token : str or None, optional
            Bearer credential added to every request when provided.
        session : requests.Session, optional
            Preconfigured session to reuse connections. Defaults to a new
            session per client.
        timeout : float, optional
            Per-request timeout in seconds. Defaults to ``10.0``.
        """
        self._header_api = header_api.rstrip("/")
        self._page_api = page_api.rstrip("/")
        self._update_comp_api = update_comp_api.rstrip("/")
        self._insert_series_api = (
            insert_series_api.rstrip("/") if insert_series_api else None
        )
        self._session = session or requests.Session()
        self.timeout = timeout
        self._headers = {
            "Accept": JSON_MEDIA_TYPE,
            "User-Agent": USER_AGENT,
        }
        if token:
            self._headers["Authorization"] = f"Bearer {token}"

    def fetch_tabs(self) -> list[typ.Any]:
        """Return the raw ``data.tabs`` list from the header endpoint."""
        payload = self._request("GET", self._header_api, label="section tabs")
        return _extract_list(payload, "tabs", label="section tabs")

    def fetch_page_components(self, section_id: str) -> list[typ.Any]:
        """Return the raw ``data.components`` list for ``section_id``."""
        url = f"{self._page_api}/{_require_segment(section_id)}"
        payload = self._request("GET", url, label=f"components of '{section_id}'")
        return _extract_list(payload, "components", label=f"section '{section_id}'")

    def submit_order(
        self, section_id: str, body: cabc.Mapping[str, typ.Any]
    ) -> typ.Any:
        """POST a commit body to the update endpoint for ``section_id``.

        Returns
        -------
        Any
            The decoded response body, or ``None`` when the backend replies
            without content.
        """
        url = f"{self._update_comp_api}/{_require_segment(section_id)}"
        return self._request(
            "POST", url, label=f"order commit for '{section_id}'", body=body
        )

    def submit_insertion(
        self, section_id: str, body: cabc.Mapping[str, typ.Any]
    ) -> typ.Any:
        """POST a series insertion body for ``section_id``."""
        if not self._insert_series_api:
            msg = "No series insertion endpoint is configured"
            raise CatalogApiError(msg)
        url = f"{self._insert_series_api}/{_require_segment(section_id)}"
        return self._request(
            "POST", url, label=f"series insertion for '{section_id}'", body=body
        )

    def _request(
        self,
        method: str,
        url: str,
        *,
        label: str,
        body: cabc.Mapping[str, typ.Any] | None = None,
    ) -> typ.Any:
        headers = dict(self._headers)
        if body is not None:
            headers["Content-Type"] = JSON_MEDIA_TYPE

        logger.debug("%s %s", method, url)
        try:
            response = self._session.request(
                method,
                url,
                headers=headers,
                json=body,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            msg = f"Failed to reach the content API for {label}: {exc}"
            raise CatalogApiError(msg) from exc

        if response.status_code >= HTTPStatus.BAD_REQUEST:
            snippet = response.text[:200]
            msg = (
                f"Content API request for {label} failed with "
                f"status {response.status_code}: {snippet}"
            )
            raise CatalogApiError(msg)

        if response.status_code == HTTPStatus.NO_CONTENT or not response.content:
            return None
        try:
            return response.json()
        except (json.JSONDecodeError, ValueError) as exc:
            msg = f"Content API response for {label} was not valid JSON"
            raise CatalogShapeError(msg) from exc


def _extract_list(payload: object, key: str, *, label: str) -> list[typ.Any]:
    data = payload.get("data") if isinstance(payload, cabc.Mapping) else None
    items = data.get(key) if isinstance(data, cabc.Mapping) else None
    if not isinstance(items, list):
        msg = f"Content API response for {label} is missing 'data.{key}'"
        raise CatalogShapeError(msg)
    return items


def _require_segment(section_id: str) -> str:
    normalized = section_id.strip()
    if not normalized:
        msg = "Section id cannot be empty"
        raise ValueError(msg)
    return normalized


__all__ = ["CatalogApiClient", "CatalogApiError", "CatalogShapeError"]

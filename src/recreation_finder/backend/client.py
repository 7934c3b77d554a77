"""Client for the Recreation Information Database (RIDB) REST API.

API docs: https://ridb.recreation.gov/docs

Every RIDB list endpoint wraps its records in the same envelope::

    {"RECDATA": [...], "METADATA": {"RESULTS": {"CURRENT_COUNT": 50, "TOTAL_COUNT": 812}}}

and is paginated with ``limit``/``offset`` query parameters.
"""

import logging
from collections.abc import Callable
from typing import Any

import requests

from recreation_finder.backend.http import build_retry, create_session
from recreation_finder.config import RidbSettings

logger = logging.getLogger(__name__)

RECDATA = "RECDATA"


class RidbApiError(RuntimeError):
    """Raised when a RIDB request fails or returns an unusable body.

    Attributes:
        status_code: HTTP status code of the failed response, when there was one.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _total_count(payload: dict[str, Any]) -> int | None:
    """Read METADATA.RESULTS.TOTAL_COUNT from a RIDB response, if present."""
    results = (payload.get("METADATA") or {}).get("RESULTS") or {}
    total = results.get("TOTAL_COUNT")
    try:
        return int(total) if total is not None else None
    except (TypeError, ValueError):
        return None


class RidbClient:
    """Thin wrapper over the RIDB endpoints used by the application.

    Attributes:
        settings (RidbSettings): API configuration.
        session (requests.Session): HTTP session carrying the API key header.
    """

    def __init__(self, settings: RidbSettings, session: requests.Session | None = None) -> None:
        """Initialize the client.

        Args:
            settings: RIDB API settings (key, base URL, paging and retry options).
            session: Optional pre-built session, mainly for tests. A retrying
                session is created when omitted.
        """
        self.settings = settings
        self.session = session or create_session(
            retry=build_retry(settings.retries, settings.backoff_factor),
            timeout=settings.timeout,
        )
        self.session.headers.update(settings.headers)

    def get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """Perform a single GET request against the API.

        Args:
            path: Endpoint path relative to the base URL (e.g. "facilities").
            params: Query parameters.

        Returns:
            The decoded JSON object.

        Raises:
            RidbApiError: On network errors, non-2xx responses or non-JSON bodies.
        """
        url = f"{self.settings.base_url.rstrip('/')}/{path.lstrip('/')}"
        try:
            response = self.session.get(url, params=params)
            response.raise_for_status()
        except requests.HTTPError as exception:
            status = exception.response.status_code if exception.response is not None else None
            logger.error(f"RIDB request to '{path}' failed with status {status}")
            raise RidbApiError(
                f"RIDB request to '{path}' failed with status {status}", status_code=status
            ) from exception
        except requests.RequestException as exception:
            logger.error(f"RIDB request to '{path}' failed: {exception}")
            raise RidbApiError(f"RIDB request to '{path}' failed: {exception}") from exception

        try:
            payload = response.json()
        except ValueError as exception:
            logger.error(f"RIDB returned a non-JSON response for '{path}'")
            raise RidbApiError(
                f"RIDB returned a non-JSON response for '{path}'",
                status_code=response.status_code,
            ) from exception

        if not isinstance(payload, dict):
            logger.error(f"RIDB returned an unexpected payload for '{path}'")
            raise RidbApiError(
                f"RIDB returned an unexpected payload for '{path}'",
                status_code=response.status_code,
            )
        return payload

    def get_all(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        progress_callback: Callable[[float], Any] | None = None,
        max_records: int | None = None,
    ) -> list[dict[str, Any]]:
        """Collect every record of a paginated endpoint.

        Pages of ``page_size`` records are requested with an increasing offset
        until the reported total is reached, a page comes back empty, or
        ``max_records`` records have been collected.

        Args:
            path: Endpoint path relative to the base URL.
            params: Query parameters shared by every page.
            progress_callback: Optional function to report progress (0.0 to 1.0).
            max_records: Record cap; defaults to ``settings.max_records``.

        Returns:
            The concatenated RECDATA records.
        """
        limit = self.settings.page_size
        cap = max_records or self.settings.max_records
        records: list[dict[str, Any]] = []
        offset = 0

        while len(records) < cap:
            payload = self.get(path, {**(params or {}), "limit": limit, "offset": offset})
            page = payload.get(RECDATA) or []
            total = _total_count(payload)
            records.extend(page)
            offset += len(page)
            logger.debug(
                f"Fetched {len(page)} records from '{path}' (offset={offset}, total={total})"
            )

            if progress_callback:
                expected = min(total, cap) if total else cap
                progress_callback(min(1.0, len(records) / expected))

            if not page:
                break
            if total is not None and offset >= total:
                break
            if total is None and len(page) < limit:
                break

        if len(records) > cap:
            logger.warning(f"Truncating '{path}' results to the first {cap} records.")
            records = records[:cap]

        if progress_callback:
            progress_callback(1.0)

        logger.info(f"Collected {len(records)} records from '{path}'.")
        return records

    def list_activities(self) -> list[dict[str, Any]]:
        """Return every RIDB activity record."""
        return self.get_all("activities")

    def search_facilities(
        self,
        params: dict[str, Any],
        progress_callback: Callable[[float], Any] | None = None,
    ) -> list[dict[str, Any]]:
        """Search facilities with nested records (activities, organizations, ...) included.

        Args:
            params: RIDB facility filters such as ``latitude``, ``longitude``,
                ``radius``, ``state`` and ``activity``.
            progress_callback: Optional function to report progress (0.0 to 1.0).

        Returns:
            Raw facility records.
        """
        filters = {key: value for key, value in params.items() if value is not None}
        query = {"full": "true", **filters}
        return self.get_all("facilities", query, progress_callback=progress_callback)

    def list_facility_addresses(self, facility_id: str) -> list[dict[str, Any]]:
        """Return the address records of a facility."""
        return self.get_all(f"facilities/{facility_id}/facilityaddresses")

    def list_facility_campsites(self, facility_id: str) -> list[dict[str, Any]]:
        """Return the campsite records of a facility."""
        return self.get_all(f"facilities/{facility_id}/campsites")

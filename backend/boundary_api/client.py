"""
BOUNDARY API CLIENT
-------------------
Client-side data manager for the dashboard API.

Keeps boundary responses keyed by (level, parent_code) and reuses them
while their version matches the last version reported by the server.
There is one global server version: any change to any stored file
invalidates every cached level.

Also tracks connectivity. A transport failure (server unreachable,
timeout, connection dropped mid-body) marks the client disconnected;
an error response from a reachable server does not. The next successful
call marks it connected again. Nothing is retried automatically.
"""

from __future__ import annotations

import json
import logging
import os

import requests

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:3001"


class ApiError(Exception):
    pass


class ApiConnectionError(ApiError):
    """The server could not be reached."""


class ApiResponseError(ApiError):
    """The server answered with a non-2xx status."""

    def __init__(self, status_code: int, message: str, payload: dict | None = None):
        super().__init__(f"HTTP {status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.payload = payload or {}


class ApiEndpoints:
    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip("/")

    def data_status(self, dataset_key: str) -> str:
        return f"{self.base_url}/api/data/status/{dataset_key}"

    def data_download(self, dataset_key: str) -> str:
        return f"{self.base_url}/api/data/download/{dataset_key}"

    def data_clear(self) -> str:
        return f"{self.base_url}/api/data/files"

    def data_version(self) -> str:
        return f"{self.base_url}/api/data/version"

    def boundaries(self, level: int, parent_code: str | None = None) -> str:
        if parent_code:
            return f"{self.base_url}/api/boundaries/{level}/{parent_code}"
        return f"{self.base_url}/api/boundaries/{level}"


class BoundaryClient:
    def __init__(
        self,
        base_url: str | None = None,
        session: requests.Session | None = None,
        timeout: float | None = 30.0,
    ):
        base_url = base_url or os.environ.get("REACT_APP_API_URL") or DEFAULT_API_URL
        self.endpoints = ApiEndpoints(base_url)
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

        self.is_connected = True
        self.connection_error: str | None = None

        self._boundaries: dict[tuple[int, str | None], dict] = {}
        self.server_version: str | None = None

    def _fetch(self, method: str, url: str) -> dict:
        try:
            resp = self.session.request(method, url, timeout=self.timeout)
        except requests.RequestException as exc:
            # nothing has been read from a response yet, so this is transport level
            logger.error("Network error: %s", exc)
            self.is_connected = False
            self.connection_error = str(exc)
            raise ApiConnectionError(str(exc)) from exc

        try:
            payload = resp.json()
        except ValueError:
            payload = {}

        if not resp.ok:
            message = payload.get("message") if isinstance(payload, dict) else None
            raise ApiResponseError(resp.status_code, message or resp.reason or "", payload)

        # reachable again
        self.is_connected = True
        self.connection_error = None
        return payload

    @staticmethod
    def _is_valid(entry: dict | None, server_version: str | None) -> bool:
        if not entry or not entry.get("version") or not server_version:
            return False
        return entry["version"] == server_version

    def get_boundaries(self, level: int, parent_code: str | None = None) -> dict:
        """FeatureCollection for a level, from the cache when still current."""
        key = (int(level), parent_code or None)

        entry = self._boundaries.get(key)
        if self._is_valid(entry, self.server_version):
            return entry["data"]

        response = self._fetch("GET", self.endpoints.boundaries(*key))
        data, version = response.get("data"), response.get("version")

        self._boundaries[key] = {"data": data, "version": version}
        self.server_version = version
        return data

    def get_data_status(self, dataset_key: str) -> bool:
        return bool(self._fetch("GET", self.endpoints.data_status(dataset_key)).get("status"))

    def download_dataset(self, dataset_key: str) -> dict:
        return self._fetch("POST", self.endpoints.data_download(dataset_key))

    def clear_files(self) -> dict:
        return self._fetch("DELETE", self.endpoints.data_clear())

    def get_data_version(self) -> str | None:
        return self._fetch("GET", self.endpoints.data_version()).get("version")

    def clear_cache(self) -> None:
        self._boundaries.clear()
        self.server_version = None

    def cache_status(self) -> dict:
        keys = list(self._boundaries)
        return {
            "boundaries_cached": len(keys),
            "boundary_levels": [{"level": level, "parent_code": parent} for level, parent in keys],
            "server_version": self.server_version,
            # rough size estimate
            "total_size": len(json.dumps({str(k): v for k, v in self._boundaries.items()})),
        }

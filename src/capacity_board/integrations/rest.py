"""Hosted table store accessed over its PostgREST-style HTTP API."""

from __future__ import annotations

import logging

import httpx

from capacity_board.db.engine import StoreError, _check_table

logger = logging.getLogger(__name__)


class RestTableSource:
    """Reads and writes board tables through ``{url}/rest/v1/{table}``."""

    def __init__(self, url: str, key: str, client: httpx.Client | None = None, timeout: float = 30.0):
        self.client = client or httpx.Client(
            base_url=f"{url.rstrip('/')}/rest/v1",
            headers={
                "apikey": key,
                "Authorization": f"Bearer {key}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
        )

    def select(self, table: str, limit: int | None = None) -> list[dict]:
        _check_table(table)
        params = {"select": "*"}
        if limit is not None:
            params["limit"] = str(limit)
        response = self._request("GET", f"/{table}", params=params)
        data = response.json()
        return data if isinstance(data, list) else []

    def insert(self, table: str, row: dict) -> None:
        _check_table(table)
        self._request("POST", f"/{table}", json=row)

    def close(self):
        self.client.close()

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            response = self.client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise StoreError(f"Table store unreachable: {e}") from e
        if response.status_code >= 400:
            raise _error_from_response(response)
        return response


def _error_from_response(response: httpx.Response) -> StoreError:
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}
    message = body.get("message") or response.text or f"HTTP {response.status_code}"
    logger.warning("Table store returned %s: %s", response.status_code, message)
    return StoreError(message, code=body.get("code"))

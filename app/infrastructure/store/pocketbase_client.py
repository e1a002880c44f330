"""Thin PocketBase REST client implementing IRecordStore.

Server-side operations run with the elevated superuser credential: the
token is obtained once, cached, and refreshed once when the store answers
401/403. All HTTP calls use httpx.AsyncClient with a bounded timeout so
they never block the event loop or hang a request.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any
from urllib.parse import quote

import httpx

from app.infrastructure.store.collections import COLLECTION_SUPERUSERS
from app.infrastructure.store.errors import (
    RecordConflictError,
    RecordNotFoundError,
    RecordStoreError,
)
from app.infrastructure.store.filters import Filter, render
from app.shared.utils.sanitization import validate_record_id

logger = logging.getLogger(__name__)

_PAGE_SIZE = 200


def _unique_violation_field(body: Any) -> str | None:
    """Return the field a 400 response rejected as not unique, if any."""
    if not isinstance(body, dict):
        return None
    data = body.get("data")
    if not isinstance(data, dict):
        return None
    for field_name, detail in data.items():
        if isinstance(detail, dict) and detail.get("code") == "validation_not_unique":
            return field_name
    return None


class PocketBaseRecordStore:
    """IRecordStore over the PocketBase records API."""

    def __init__(
        self,
        base_url: str,
        admin_email: str,
        admin_password: str,
        *,
        timeout: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base = base_url.rstrip("/")
        self._admin_email = admin_email
        self._admin_password = admin_password
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=timeout)
        self._owns_http = http_client is None
        self._token: str | None = None
        self._token_lock = asyncio.Lock()

    async def aclose(self) -> None:
        """Close the HTTP client only if we created it (do not close injected client)."""
        if self._owns_http:
            await self._http.aclose()

    def _records_url(self, collection: str, record_id: str | None = None) -> str:
        url = f"{self._base}/api/collections/{quote(collection, safe='')}/records"
        if record_id is not None:
            # Ids from request paths never reach the store unless well-formed
            try:
                url = f"{url}/{validate_record_id(record_id)}"
            except ValueError:
                raise RecordNotFoundError(collection, record_id) from None
        return url

    async def _authenticate_admin(self) -> str:
        async with self._token_lock:
            if self._token is not None:
                return self._token
            url = f"{self._base}/api/collections/{COLLECTION_SUPERUSERS}/auth-with-password"
            try:
                resp = await self._http.post(
                    url, json={"identity": self._admin_email, "password": self._admin_password}
                )
            except httpx.HTTPError as e:
                raise RecordStoreError(f"Superuser auth transport error: {type(e).__name__}") from e
            if resp.status_code != 200:
                raise RecordStoreError(f"Superuser auth failed with status {resp.status_code}")
            self._token = resp.json().get("token")
            if not self._token:
                raise RecordStoreError("Superuser auth returned no token")
            return self._token

    async def _request(
        self,
        method: str,
        url: str,
        *,
        collection: str,
        record_id: str | None = None,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Send an authenticated request; re-authenticate once on 401/403.

        404 on a single-record URL raises RecordNotFoundError; a unique
        violation raises RecordConflictError; any other failure raises
        RecordStoreError.
        """
        for attempt in (1, 2):
            token = await self._authenticate_admin()
            try:
                resp = await self._http.request(
                    method, url, params=params, json=body, headers={"Authorization": token}
                )
            except httpx.TimeoutException as e:
                raise RecordStoreError(f"Store timeout on {method} {collection}") from e
            except httpx.HTTPError as e:
                raise RecordStoreError(f"Store transport error on {method} {collection}: {type(e).__name__}") from e
            if resp.status_code in (401, 403) and attempt == 1:
                logger.info("Store rejected superuser token; re-authenticating")
                self._token = None
                continue
            break

        if resp.status_code == 404 and record_id is not None:
            raise RecordNotFoundError(collection, record_id)
        if resp.status_code == 400:
            try:
                payload = resp.json()
            except ValueError:
                payload = None
            conflict_field = _unique_violation_field(payload)
            if conflict_field is not None:
                raise RecordConflictError(collection, conflict_field)
            raise RecordStoreError(f"Store rejected {method} {collection} (400)")
        if resp.status_code >= 300:
            raise RecordStoreError(f"Store returned {resp.status_code} on {method} {collection}")
        return resp

    async def get(self, collection: str, record_id: str) -> dict[str, Any] | None:
        try:
            resp = await self._request(
                "GET", self._records_url(collection, record_id), collection=collection, record_id=record_id
            )
        except RecordNotFoundError:
            return None
        return resp.json()

    async def list(
        self,
        collection: str,
        filter_: Filter | None = None,
        sort: str | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        params: dict[str, Any] = {"skipTotal": 1}
        expression = render(filter_)
        if expression:
            params["filter"] = expression
        if sort:
            params["sort"] = sort
        per_page = min(limit, _PAGE_SIZE) if limit is not None else _PAGE_SIZE
        params["perPage"] = per_page

        items: list[dict[str, Any]] = []
        page = 1
        while True:
            params["page"] = page
            resp = await self._request("GET", self._records_url(collection), collection=collection, params=params)
            batch = resp.json().get("items", [])
            items.extend(batch)
            if limit is not None and len(items) >= limit:
                return items[:limit]
            if len(batch) < per_page:
                return items
            page += 1

    async def first(
        self,
        collection: str,
        filter_: Filter | None = None,
        sort: str | None = None,
    ) -> dict[str, Any] | None:
        items = await self.list(collection, filter_, sort, limit=1)
        return items[0] if items else None

    async def create(self, collection: str, fields: dict[str, Any]) -> dict[str, Any]:
        resp = await self._request("POST", self._records_url(collection), collection=collection, body=fields)
        return resp.json()

    async def update(self, collection: str, record_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        resp = await self._request(
            "PATCH",
            self._records_url(collection, record_id),
            collection=collection,
            record_id=record_id,
            body=fields,
        )
        return resp.json()

    async def delete(self, collection: str, record_id: str) -> None:
        await self._request(
            "DELETE", self._records_url(collection, record_id), collection=collection, record_id=record_id
        )

    async def authenticate(
        self, collection: str, identity: str, password: str
    ) -> dict[str, Any] | None:
        """Check an account password with the store's own auth endpoint (no superuser token)."""
        url = f"{self._base}/api/collections/{quote(collection, safe='')}/auth-with-password"
        try:
            resp = await self._http.post(url, json={"identity": identity, "password": password})
        except httpx.HTTPError as e:
            raise RecordStoreError(f"Store transport error on auth: {type(e).__name__}") from e
        if resp.status_code in (400, 401, 404):
            return None
        if resp.status_code != 200:
            raise RecordStoreError(f"Store returned {resp.status_code} on auth")
        return resp.json().get("record")

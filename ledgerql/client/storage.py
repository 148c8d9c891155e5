"""Storage pass-through to the application's ``/api/storage`` routes."""
from __future__ import annotations

from urllib.parse import quote

import httpx

from ledgerql.client.backends import guarded, send_json
from ledgerql.schema.result import QueryResult


class BucketClient:
    """File operations on one storage bucket."""

    def __init__(self, http: httpx.AsyncClient, bucket: str, api_prefix: str = "/api") -> None:
        self._http = http
        self.bucket = bucket
        self._prefix = api_prefix.rstrip("/")

    async def upload(
        self,
        path: str,
        content: bytes,
        *,
        content_type: str = "application/octet-stream",
    ) -> QueryResult:
        """Upload ``content`` to ``path`` as a multipart form."""
        filename = path.rsplit("/", 1)[-1]

        async def _call() -> QueryResult:
            payload = await send_json(
                self._http,
                "POST",
                f"{self._prefix}/storage/upload",
                files={"file": (filename, content, content_type)},
                data={"bucket": self.bucket, "path": path},
                failure="Upload failed",
            )
            return QueryResult(data=(payload or {}).get("data"))

        return await guarded("upload", self.bucket, _call)

    async def remove(self, paths: list[str]) -> QueryResult:
        async def _call() -> QueryResult:
            payload = await send_json(
                self._http,
                "POST",
                f"{self._prefix}/storage/delete",
                json={"bucket": self.bucket, "paths": list(paths)},
                failure="Delete failed",
            )
            return QueryResult(data=(payload or {}).get("data"))

        return await guarded("remove", self.bucket, _call)

    def get_public_url(self, path: str) -> QueryResult:
        """Return the URL of the route that serves ``path``; no request is made."""
        url = f"{self._prefix}/storage/serve?bucket={quote(self.bucket, safe='')}&path={quote(path, safe='')}"
        return QueryResult(data={"publicUrl": url})


class StorageInterface:
    """``client.storage``."""

    def __init__(self, http: httpx.AsyncClient, api_prefix: str = "/api") -> None:
        self._http = http
        self._prefix = api_prefix

    def from_(self, bucket: str) -> BucketClient:
        return BucketClient(self._http, bucket, self._prefix)

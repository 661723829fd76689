"""REST client for the hosted object store."""

from __future__ import annotations

from urllib.parse import quote

import httpx
from loguru import logger

from jobconnect.core.exceptions import UploadError


class StorageClient:
    """Upload objects by path and resolve their download URLs."""

    def __init__(self, http_client: httpx.AsyncClient, bucket: str) -> None:
        self.http_client = http_client
        self.bucket = bucket

    async def aclose(self) -> None:
        await self.http_client.aclose()

    async def upload(
        self,
        path: str,
        content: bytes,
        content_type: str = "application/octet-stream",
    ) -> None:
        """Store ``content`` under ``path``.

        Raises:
            UploadError: If the object store rejects or cannot receive the file.
        """
        log = logger.bind(client=self.__class__.__name__, path=path, size=len(content))
        log.info("Uploading object")

        try:
            response = await self.http_client.post(
                f"/b/{self.bucket}/o",
                params={"uploadType": "media", "name": path},
                content=content,
                headers={"Content-Type": content_type},
            )
        except httpx.HTTPError as exc:
            log.bind(error=str(exc)).error("Object upload failed")
            raise UploadError(f"File upload failed: {exc}", status_code=502) from exc

        if not response.is_success:
            log.bind(status=response.status_code).error("Object store rejected upload")
            raise UploadError(
                f"File upload failed with status {response.status_code}",
                status_code=502,
            )

        log.info("Uploaded object")

    async def download_url(self, path: str) -> str:
        """Build a tokenized download URL from the object metadata.

        Raises:
            UploadError: If the metadata is missing or carries no download token.
        """
        quoted = quote(path, safe="")

        try:
            response = await self.http_client.get(f"/b/{self.bucket}/o/{quoted}")
        except httpx.HTTPError as exc:
            raise UploadError(
                f"Could not resolve download URL: {exc}", status_code=502
            ) from exc

        if not response.is_success:
            raise UploadError(
                f"Could not resolve download URL (status {response.status_code})",
                status_code=502,
            )

        tokens = str(response.json().get("downloadTokens") or "")
        token = tokens.split(",")[0].strip()
        if not token:
            raise UploadError("Uploaded file has no download token", status_code=502)

        base_url = str(self.http_client.base_url).rstrip("/")
        return f"{base_url}/b/{self.bucket}/o/{quoted}?alt=media&token={token}"


__all__ = ["StorageClient"]

from __future__ import annotations

import asyncio
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from azure.storage.blob import (
    BlobSasPermissions,
    BlobServiceClient,
    ContentSettings,
    generate_blob_sas,
)

from app.config import settings
from app.domain.errors import StorageNotConfigured

logger = logging.getLogger(__name__)

_EXT_BY_CONTENT_TYPE = {
    "image/png": "png",
    "image/webp": "webp",
    "image/jpg": "jpg",
    "image/jpeg": "jpg",
    "image/heic": "heic",
    "image/gif": "gif",
}


def ext_for_content_type(content_type: str, filename: Optional[str] = None) -> str:
    ct = (content_type or "").lower().split(";")[0].strip()
    if ct in _EXT_BY_CONTENT_TYPE:
        return _EXT_BY_CONTENT_TYPE[ct]
    name = (filename or "").strip()
    if "." in name:
        return name.rsplit(".", 1)[-1].lower() or "jpg"
    return "jpg"


def _parse_connection_string(connection_string: str) -> Tuple[str, str]:
    parts = dict(item.split("=", 1) for item in connection_string.split(";") if "=" in item)
    account_name = parts.get("AccountName")
    account_key = parts.get("AccountKey")
    if not account_name or not account_key:
        raise StorageNotConfigured("Could not parse storage account credentials")
    return account_name, account_key


class AzureStorageService:
    """Azure Blob Storage for uploaded photos."""

    def __init__(
        self,
        connection_string: Optional[str] = None,
        container: Optional[str] = None,
        blob_service: Optional[BlobServiceClient] = None,
    ):
        self.connection_string = connection_string or settings.AZURE_STORAGE_CONNECTION_STRING
        if not self.connection_string:
            raise StorageNotConfigured("missing_env:AZURE_STORAGE_CONNECTION_STRING")
        self.container = container or settings.UPLOAD_CONTAINER
        self.blob_service = blob_service or BlobServiceClient.from_connection_string(self.connection_string)

    @staticmethod
    def blob_name_for(ext: str, now: Optional[datetime] = None) -> str:
        ts = now or datetime.now(timezone.utc)
        return f"uploads/{ts:%Y}/{ts:%m}/{uuid.uuid4().hex}.{ext}"

    async def upload_image(
        self,
        data: bytes,
        content_type: str = "image/jpeg",
        filename: Optional[str] = None,
    ) -> Tuple[str, str]:
        """
        Upload photo bytes.

        Returns:
            (storage_path, blob_url_with_sas)
        """
        blob_name = self.blob_name_for(ext_for_content_type(content_type, filename))
        await asyncio.to_thread(self._sync_upload_blob, blob_name=blob_name, data=data, content_type=content_type)
        logger.info("photo_uploaded", extra={"blob": blob_name, "bytes": len(data)})

        return blob_name, self.generate_sas_url(blob_name)

    def _sync_upload_blob(self, *, blob_name: str, data: bytes, content_type: str) -> None:
        blob_client = self.blob_service.get_blob_client(container=self.container, blob=blob_name)
        blob_client.upload_blob(
            data,
            overwrite=True,
            content_settings=ContentSettings(content_type=content_type),
        )

    def generate_sas_url(self, blob_name: str, hours: Optional[int] = None) -> str:
        """Read-only SAS URL; the inference provider fetches the photo through it."""
        account_name, account_key = _parse_connection_string(self.connection_string)
        ttl = hours if hours is not None else settings.UPLOAD_SAS_EXPIRY_HOURS

        sas_token = generate_blob_sas(
            account_name=account_name,
            container_name=self.container,
            blob_name=blob_name,
            account_key=account_key,
            permission=BlobSasPermissions(read=True),
            expiry=datetime.now(timezone.utc) + timedelta(hours=ttl),
        )
        return f"https://{account_name}.blob.core.windows.net/{self.container}/{blob_name}?{sas_token}"

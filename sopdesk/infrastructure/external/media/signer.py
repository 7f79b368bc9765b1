"""Signed direct uploads to S3-compatible media storage.

The browser uploads training videos straight to the bucket; the API only
issues a presigned POST (URL plus form fields) scoped to one key under the
tenant's folder, so storage credentials never leave the server.
"""

from __future__ import annotations

import asyncio
from datetime import timedelta
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from sopdesk.domain.exceptions import UpstreamFailureException
from sopdesk.shared.utils.generators import generate_cuid


class MediaUploadSigner:
    """Issues presigned upload forms (implements IMediaSigner).

    boto3 is synchronous; signing runs in a worker thread.
    """

    def __init__(
        self,
        bucket: str,
        *,
        region: str = "us-east-1",
        endpoint_url: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
        base_folder: str = "training",
        expiration: timedelta = timedelta(minutes=15),
        max_upload_bytes: int = 500 * 1024 * 1024,
    ) -> None:
        self.bucket = bucket
        self._base_folder = base_folder.strip("/")
        self._expiration = expiration
        self._max_upload_bytes = max_upload_bytes
        extra = {} if endpoint_url is None else {"endpoint_url": endpoint_url}
        self._client = boto3.client(
            "s3",
            region_name=region,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            config=Config(signature_version="s3v4"),
            **extra,
        )

    def object_key(self, owner_id: str, public_id: str | None = None) -> str:
        """Key for one upload: <base folder>/<owner id>/<public id or fresh cuid>."""
        name = (public_id or generate_cuid()).strip("/")
        return f"{self._base_folder}/{owner_id}/{name}"

    def _presign(self, key: str) -> dict[str, Any]:
        return self._client.generate_presigned_post(
            Bucket=self.bucket,
            Key=key,
            Conditions=[["content-length-range", 1, self._max_upload_bytes]],
            ExpiresIn=int(self._expiration.total_seconds()),
        )

    async def sign_upload(self, owner_id: str, public_id: str | None = None) -> dict[str, Any]:
        """Return {url, fields, key, expires_in} for one upload into the owner's folder."""
        key = self.object_key(owner_id, public_id)
        try:
            presigned = await asyncio.to_thread(self._presign, key)
        except (BotoCoreError, ClientError) as e:
            raise UpstreamFailureException("media", type(e).__name__) from e
        return {
            "url": presigned["url"],
            "fields": presigned["fields"],
            "key": key,
            "expires_in": int(self._expiration.total_seconds()),
        }

# src/quadlet_deploy/storage/s3.py
"""
Artifact store S3-compatível (AWS S3, Cloudflare R2).

O client boto3 é síncrono; cada chamada é executada com
`asyncio.to_thread` para não bloquear o loop do orquestrador.

Limites explícitos:
    - Não cria bucket
    - Não configura ACL nem domínio público
"""

from __future__ import annotations

import asyncio
from typing import Any, List, Optional

import boto3
from botocore.exceptions import ClientError


_MISSING_CODES = ("404", "NoSuchKey", "NotFound")


def _is_missing(exc: ClientError) -> bool:
    return str(exc.response.get("Error", {}).get("Code")) in _MISSING_CODES


class S3ArtifactStore:
    def __init__(self, bucket: str, client: Any):
        if not bucket:
            raise ValueError("bucket must be a non-empty string")
        self.bucket = bucket
        self.client = client

    @classmethod
    def from_endpoint(cls, bucket: str, endpoint_url: Optional[str] = None) -> "S3ArtifactStore":
        """Cria o client boto3; para R2 use o endpoint `https://<account>.r2.cloudflarestorage.com`."""
        return cls(bucket=bucket, client=boto3.client("s3", endpoint_url=endpoint_url))

    def _put(self, key: str, content: str, content_type: str) -> None:
        self.client.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=content.encode("utf-8"),
            ContentType=content_type,
        )

    async def put(self, path: str, filename: str, content: str, content_type: str) -> str:
        key = f"{path}{filename}"
        await asyncio.to_thread(self._put, key, content, content_type)
        return key

    def _list(self, prefix: str) -> List[str]:
        keys: List[str] = []
        kwargs = {"Bucket": self.bucket, "Prefix": prefix}
        while True:
            response = self.client.list_objects_v2(**kwargs)
            keys.extend(obj["Key"] for obj in response.get("Contents", []))
            if not response.get("IsTruncated"):
                break
            kwargs["ContinuationToken"] = response["NextContinuationToken"]
        return keys

    async def list(self, prefix: str) -> List[str]:
        return await asyncio.to_thread(self._list, prefix)

    async def delete(self, key: str) -> None:
        await asyncio.to_thread(self.client.delete_object, Bucket=self.bucket, Key=key)

    def _head(self, key: str) -> bool:
        try:
            self.client.head_object(Bucket=self.bucket, Key=key)
        except ClientError as exc:
            if _is_missing(exc):
                return False
            raise
        return True

    async def head(self, key: str) -> bool:
        return await asyncio.to_thread(self._head, key)

    def _get(self, key: str) -> Optional[str]:
        try:
            response = self.client.get_object(Bucket=self.bucket, Key=key)
        except ClientError as exc:
            if _is_missing(exc):
                return None
            raise
        return response["Body"].read().decode("utf-8")

    async def get(self, key: str) -> Optional[str]:
        return await asyncio.to_thread(self._get, key)

"""S3 persistence backend: one JSON object per key in a bucket."""

from __future__ import annotations

import logging
from typing import Any

import boto3
from botocore.exceptions import ClientError

log = logging.getLogger(__name__)


class S3PersistenceBackend:
    """Stores data as JSON objects in an S3 bucket, optionally under a tenant prefix."""

    def __init__(
        self,
        bucket: str,
        prefix: str = "intake/",
        region: str = "eu-central-1",
        tenant_id: str = "",
        kms_key_id: str = "",
    ) -> None:
        self._bucket = bucket
        self._prefix = f"{tenant_id}/{prefix}" if tenant_id else prefix
        self._kms_key_id = kms_key_id
        self._s3 = boto3.client("s3", region_name=region)

    def _full_key(self, key: str) -> str:
        return f"{self._prefix}{key}.json"

    def save(self, key: str, data: str) -> None:
        put_kwargs: dict[str, Any] = {
            "Bucket": self._bucket,
            "Key": self._full_key(key),
            "Body": data.encode("utf-8"),
            "ContentType": "application/json",
        }
        if self._kms_key_id:
            put_kwargs["ServerSideEncryption"] = "aws:kms"
            put_kwargs["SSEKMSKeyId"] = self._kms_key_id
        self._s3.put_object(**put_kwargs)
        log.debug("Saved %s to s3://%s/%s", key, self._bucket, self._full_key(key))

    def load(self, key: str) -> str:
        try:
            response = self._s3.get_object(Bucket=self._bucket, Key=self._full_key(key))
        except self._s3.exceptions.NoSuchKey:
            raise KeyError(f"Not found in S3: {key}")
        return response["Body"].read().decode("utf-8")

    def exists(self, key: str) -> bool:
        try:
            self._s3.head_object(Bucket=self._bucket, Key=self._full_key(key))
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") in ("404", "NoSuchKey", "NotFound"):
                return False
            raise
        return True

    def delete(self, key: str) -> None:
        self._s3.delete_object(Bucket=self._bucket, Key=self._full_key(key))

    def list_keys(self, prefix: str = "") -> list[str]:
        full_prefix = f"{self._prefix}{prefix}"
        paginator = self._s3.get_paginator("list_objects_v2")
        keys = []
        for page in paginator.paginate(Bucket=self._bucket, Prefix=full_prefix):
            for obj in page.get("Contents", []):
                key = obj["Key"][len(self._prefix):]
                if key.endswith(".json"):
                    key = key[:-5]
                keys.append(key)
        return sorted(keys)

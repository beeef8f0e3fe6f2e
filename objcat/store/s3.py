#
# Copyright (c) 2025, NVIDIA CORPORATION. All rights reserved.
#

from typing import Any, Dict, Iterator, Optional

import boto3
from botocore.config import Config

from objcat.config import StoreConfig
from objcat.const import DEFAULT_CHUNK_SIZE, DEFAULT_CONNECT_TIMEOUT
from objcat.store.base import ObjectStore
from objcat.types import ListedObject, ObjectAttributes
from objcat.utils import get_logger

# Version id S3 reports for objects written while versioning was off
NULL_VERSION = "null"

logger = get_logger(__name__)


class S3ObjectStore(ObjectStore):
    """
    Object store backed by an S3-compatible service through a single shared boto3 client.

    botocore's own retries are disabled; every request is attempted once here and retried by the fetcher, so the
    configured retry ceiling is the only one that applies. Ranged reads send `IfMatch` with the entity tag observed
    at listing or HEAD time, so an object replaced mid-read fails with `PreconditionFailed`.

    Args:
        config (StoreConfig): Endpoint, credentials profile, region, TLS and pool settings
        client (Any, optional): Pre-built boto3 S3 client to use instead of creating one
        concurrency (int, optional): Range requests issued at once; the connection pool holds at least this many
    """

    def __init__(self, config: StoreConfig, client: Any = None, concurrency: int = 1):
        self._config = config
        self._pool_size = max(config.max_pool_size, concurrency)
        self._client = client or self._create_client()

    @property
    def client(self) -> Any:
        return self._client

    @property
    def pool_size(self) -> int:
        return self._pool_size

    def _create_client(self) -> Any:
        config = self._config
        if isinstance(config.timeout, tuple):
            connect_timeout, read_timeout = config.timeout
        else:
            connect_timeout = read_timeout = config.timeout or DEFAULT_CONNECT_TIMEOUT

        session = boto3.Session(profile_name=config.profile, region_name=config.region)
        client_kwargs: Dict[str, Any] = {
            "config": Config(
                max_pool_connections=self._pool_size,
                connect_timeout=connect_timeout,
                read_timeout=read_timeout,
                retries={"max_attempts": 0},
            ),
        }
        if config.endpoint:
            client_kwargs["endpoint_url"] = config.endpoint
        if config.skip_verify:
            client_kwargs["verify"] = False
        elif config.ca_cert:
            client_kwargs["verify"] = config.ca_cert
        logger.debug(
            "Creating S3 client (endpoint: %s, pool: %d)",
            config.endpoint or "default",
            self._pool_size,
        )
        return session.client("s3", **client_kwargs)

    @staticmethod
    def _conditions(version_id: Optional[str], etag: Optional[str] = None) -> Dict[str, str]:
        kwargs = {}
        if version_id:
            kwargs["VersionId"] = version_id
        if etag:
            kwargs["IfMatch"] = etag
        return kwargs

    def head_object(
        self, bucket: str, key: str, version_id: Optional[str] = None
    ) -> ObjectAttributes:
        resp = self._client.head_object(
            Bucket=bucket, Key=key, **self._conditions(version_id)
        )
        version = resp.get("VersionId") or ""
        return ObjectAttributes(
            size=int(resp["ContentLength"]),
            version_id="" if version == NULL_VERSION else version,
            etag=resp.get("ETag") or "",
        )

    # pylint: disable=too-many-arguments,too-many-positional-arguments
    def get_object_range(
        self,
        bucket: str,
        key: str,
        start: int,
        end: int,
        version_id: Optional[str] = None,
        etag: Optional[str] = None,
    ) -> bytes:
        body = self._get_body(bucket, key, start, end, version_id, etag)
        try:
            return body.read()
        finally:
            body.close()

    def open_object_range(
        self,
        bucket: str,
        key: str,
        start: int,
        end: int,
        version_id: Optional[str] = None,
        etag: Optional[str] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> Iterator[bytes]:
        body = self._get_body(bucket, key, start, end, version_id, etag)
        try:
            yield from body.iter_chunks(chunk_size)
        finally:
            body.close()

    def _get_body(
        self,
        bucket: str,
        key: str,
        start: int,
        end: int,
        version_id: Optional[str],
        etag: Optional[str],
    ):
        # HTTP ranges are inclusive on both ends
        resp = self._client.get_object(
            Bucket=bucket,
            Key=key,
            Range=f"bytes={start}-{end - 1}",
            **self._conditions(version_id, etag),
        )
        return resp["Body"]

    def list_objects(self, bucket: str, prefix: str = "") -> Iterator[ListedObject]:
        paginator = self._client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=bucket, Prefix=prefix):
            for entry in page.get("Contents", []):
                yield ListedObject(
                    key=entry["Key"],
                    size=int(entry["Size"]),
                    etag=entry.get("ETag") or "",
                )

    def close(self):
        self._client.close()

#
# Copyright (c) 2025, NVIDIA CORPORATION. All rights reserved.
#

from typing import Dict, Iterator, Optional

import requests

from objcat.config import StoreConfig
from objcat.const import (
    ACT_LIST,
    AIS_VERSION,
    DEFAULT_CHUNK_SIZE,
    HEADER_ACCEPT,
    HEADER_CONTENT_LENGTH,
    HEADER_RANGE,
    HTTP_METHOD_GET,
    HTTP_METHOD_HEAD,
    MSGPACK_CONTENT_TYPE,
    PATH_SEPARATOR,
    QPARAM_PROVIDER,
    URL_PATH_BUCKETS,
    URL_PATH_OBJECTS,
)
from objcat.errors import VersionNotFound
from objcat.provider import Provider
from objcat.retry_config import RetryConfig
from objcat.store.ais.request_client import RequestClient
from objcat.store.ais.session_manager import SessionManager
from objcat.store.base import ObjectStore
from objcat.types import (
    ActionMsg,
    BucketList,
    ListedObject,
    ListObjectsMsg,
    ObjectAttributes,
)
from objcat.utils import get_logger

LIST_PROPS = "name,size,version"

logger = get_logger(__name__)


class AISObjectStore(ObjectStore):
    """
    Object store reached through an AIStore gateway, which serves AIS buckets and fronts remote ones (s3://, gs://,
    az://).

    AIS keeps one version per object and reports it in the `ais-version` header, so a pinned version can only be
    read while it is the current one; anything else is reported as `VersionNotFound`. Reads are pinned on that
    version alone; the `etag` argument of range reads is not sent to the gateway.

    Args:
        config (StoreConfig): Gateway endpoint, token, TLS, timeout and pool settings
        provider (Provider, optional): Provider of every bucket this store is asked about. Defaults to AIS.
        retry_config (RetryConfig, optional): Supplies the status-code retry mounted on the HTTP session
        request_client (RequestClient, optional): Pre-built client to use instead of creating one
        concurrency (int, optional): Range requests issued at once; sizes the HTTP connection pool
    """

    def __init__(
        self,
        config: StoreConfig,
        provider: Provider = Provider.AIS,
        retry_config: Optional[RetryConfig] = None,
        request_client: Optional[RequestClient] = None,
        concurrency: int = 1,
    ):
        self._provider = provider
        if request_client is None:
            retry_config = retry_config or RetryConfig.default()
            session_manager = SessionManager.from_config(
                config, retry=retry_config.http_retry, concurrency=concurrency
            )
            request_client = RequestClient(
                endpoint=config.endpoint,
                session_manager=session_manager,
                timeout=config.timeout,
                token=config.token,
            )
        self._client = request_client

    @property
    def provider(self) -> Provider:
        return self._provider

    @property
    def client(self) -> RequestClient:
        return self._client

    @property
    def _qparams(self) -> Dict[str, str]:
        return {QPARAM_PROVIDER: self._provider.value}

    @staticmethod
    def _object_path(bucket: str, key: str) -> str:
        return f"{URL_PATH_OBJECTS}/{bucket}/{key}"

    def head_object(
        self, bucket: str, key: str, version_id: Optional[str] = None
    ) -> ObjectAttributes:
        resp = self._client.request(
            HTTP_METHOD_HEAD,
            path=self._object_path(bucket, key),
            params=self._qparams,
        )
        version = resp.headers.get(AIS_VERSION, "")
        self._check_version(key, version_id, version)
        return ObjectAttributes(
            size=int(resp.headers.get(HEADER_CONTENT_LENGTH, 0)), version_id=version
        )

    # pylint: disable=too-many-arguments,too-many-positional-arguments,unused-argument
    def get_object_range(
        self,
        bucket: str,
        key: str,
        start: int,
        end: int,
        version_id: Optional[str] = None,
        etag: Optional[str] = None,
    ) -> bytes:
        resp = self._get(bucket, key, start, end, version_id, stream=False)
        return resp.content

    # pylint: disable=unused-argument
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
        resp = self._get(bucket, key, start, end, version_id, stream=True)
        try:
            yield from resp.iter_content(chunk_size=chunk_size)
        finally:
            resp.close()

    # pylint: disable=too-many-arguments,too-many-positional-arguments
    def _get(
        self,
        bucket: str,
        key: str,
        start: int,
        end: int,
        version_id: Optional[str],
        stream: bool,
    ) -> requests.Response:
        resp = self._client.request(
            HTTP_METHOD_GET,
            path=self._object_path(bucket, key),
            params=self._qparams,
            headers={HEADER_RANGE: f"bytes={start}-{end - 1}"},
            stream=stream,
        )
        version = resp.headers.get(AIS_VERSION)
        if version is not None and version_id:
            try:
                self._check_version(key, version_id, version)
            except VersionNotFound:
                resp.close()
                raise
        return resp

    @staticmethod
    def _check_version(key: str, version_id: Optional[str], version: str):
        if version_id and version != version_id:
            raise VersionNotFound(key, version_id)

    def list_objects(self, bucket: str, prefix: str = "") -> Iterator[ListedObject]:
        uuid, token = "", ""
        while True:
            page = self._list_page(bucket, prefix, uuid, token)
            for entry in page.entries:
                # Virtual directory entries are not objects
                if entry.name.endswith(PATH_SEPARATOR):
                    continue
                yield ListedObject(
                    key=entry.name, size=entry.size, version_id=entry.version
                )
            uuid, token = page.uuid, page.continuation_token
            if not token:
                return

    def _list_page(
        self, bucket: str, prefix: str, uuid: str, token: str
    ) -> BucketList:
        value = ListObjectsMsg(
            prefix=prefix,
            page_size=0,
            uuid=uuid,
            props=LIST_PROPS,
            continuation_token=token,
        ).as_dict()
        action = ActionMsg(action=ACT_LIST, value=value).model_dump()
        return self._client.request_deserialize(
            HTTP_METHOD_GET,
            path=f"{URL_PATH_BUCKETS}/{bucket}",
            res_model=BucketList,
            headers={HEADER_ACCEPT: MSGPACK_CONTENT_TYPE},
            json=action,
            params=self._qparams,
        )

    def close(self):
        self._client.session_manager.close()

#
# Copyright (c) 2025, NVIDIA CORPORATION. All rights reserved.
#

import unittest
from unittest.mock import Mock, patch

from objcat.config import StoreConfig
from objcat.const import (
    AIS_VERSION,
    BACKEND_AIS,
    HEADER_ACCEPT,
    HEADER_CONTENT_LENGTH,
    HEADER_RANGE,
    HTTP_METHOD_GET,
    HTTP_METHOD_HEAD,
    MSGPACK_CONTENT_TYPE,
)
from objcat.errors import VersionNotFound
from objcat.provider import Provider
from objcat.retry_config import RetryConfig
from objcat.store.ais import AISObjectStore, RequestClient, SessionManager
from objcat.types import BucketEntry, BucketList, ListedObject
from tests.const import BUCKET, TEST_ENDPOINT


# pylint: disable=unused-variable
class TestAISObjectStore(unittest.TestCase):
    def setUp(self) -> None:
        self.mock_client = Mock(spec=RequestClient)
        self.mock_client.session_manager = Mock(spec=SessionManager)
        self.config = StoreConfig(backend=BACKEND_AIS, endpoint=TEST_ENDPOINT)
        self.store = AISObjectStore(
            self.config, provider=Provider.AMAZON, request_client=self.mock_client
        )
        self.params = {"provider": "aws"}
        self.object_path = f"objects/{BUCKET}/dir/obj"

    def _response(self, headers=None, content=b""):
        resp = Mock()
        resp.headers = headers or {}
        resp.content = content
        resp.iter_content.return_value = iter([content[:2], content[2:]])
        self.mock_client.request.return_value = resp
        return resp

    @patch("objcat.store.ais.store.RequestClient")
    @patch("objcat.store.ais.store.SessionManager")
    def test_init_creates_client(self, mock_session_manager, mock_request_client):
        retry_config = RetryConfig(max_attempts=2)
        config = StoreConfig(
            backend=BACKEND_AIS,
            endpoint=TEST_ENDPOINT,
            token="token",
            skip_verify=True,
            max_pool_size=20,
            timeout=5.0,
        )
        store = AISObjectStore(config, retry_config=retry_config, concurrency=32)

        self.assertEqual(Provider.AIS, store.provider)
        mock_session_manager.from_config.assert_called_once_with(
            config, retry=retry_config.http_retry, concurrency=32
        )
        mock_request_client.assert_called_once_with(
            endpoint=TEST_ENDPOINT,
            session_manager=mock_session_manager.from_config.return_value,
            timeout=5.0,
            token="token",
        )
        self.assertEqual(mock_request_client.return_value, store.client)

    def test_head_object(self):
        self._response({HEADER_CONTENT_LENGTH: "42", AIS_VERSION: "3"})
        attrs = self.store.head_object(BUCKET, "dir/obj")
        self.assertEqual(42, attrs.size)
        self.assertEqual("3", attrs.version_id)
        self.mock_client.request.assert_called_once_with(
            HTTP_METHOD_HEAD, path=self.object_path, params=self.params
        )

    def test_head_object_version(self):
        self._response({HEADER_CONTENT_LENGTH: "42", AIS_VERSION: "3"})
        self.assertEqual(42, self.store.head_object(BUCKET, "dir/obj", "3").size)
        with self.assertRaises(VersionNotFound) as context:
            self.store.head_object(BUCKET, "dir/obj", "2")
        self.assertEqual('version "2" of object "dir/obj" not found', context.exception.message)

    def test_get_object_range(self):
        self._response({AIS_VERSION: "1"}, content=b"abcd")
        self.assertEqual(b"abcd", self.store.get_object_range(BUCKET, "dir/obj", 10, 14))
        self.mock_client.request.assert_called_once_with(
            HTTP_METHOD_GET,
            path=self.object_path,
            params=self.params,
            headers={HEADER_RANGE: "bytes=10-13"},
            stream=False,
        )

    def test_get_object_range_ignores_etag(self):
        self._response({AIS_VERSION: "1"}, content=b"abcd")
        self.store.get_object_range(BUCKET, "dir/obj", 0, 4, version_id="1", etag='"e"')
        _, kwargs = self.mock_client.request.call_args
        self.assertEqual({HEADER_RANGE: "bytes=0-3"}, kwargs["headers"])

    def test_get_object_range_version_mismatch(self):
        resp = self._response({AIS_VERSION: "5"}, content=b"abcd")
        with self.assertRaises(VersionNotFound):
            self.store.get_object_range(BUCKET, "dir/obj", 0, 4, version_id="4")
        resp.close.assert_called_once()

    def test_open_object_range(self):
        resp = self._response(content=b"abcdef")
        chunks = list(self.store.open_object_range(BUCKET, "dir/obj", 0, 6, chunk_size=2))
        self.assertEqual([b"ab", b"cdef"], chunks)
        resp.iter_content.assert_called_once_with(chunk_size=2)
        resp.close.assert_called_once()
        _, kwargs = self.mock_client.request.call_args
        self.assertTrue(kwargs["stream"])

    def test_open_object_range_closed_early(self):
        resp = self._response(content=b"abcdef")
        stream = self.store.open_object_range(BUCKET, "dir/obj", 0, 6)
        next(stream)
        stream.close()
        resp.close.assert_called_once()

    def test_list_objects_pages(self):
        self.mock_client.request_deserialize.side_effect = [
            BucketList(
                UUID="uuid",
                ContinuationToken="page-2",
                Entries=[BucketEntry(n="dir/", s=0), BucketEntry(n="dir/b", s=2, v="1")],
            ),
            BucketList(UUID="uuid", ContinuationToken="", Entries=None),
        ]

        listed = list(self.store.list_objects(BUCKET, "dir/"))

        self.assertEqual([ListedObject(key="dir/b", size=2, version_id="1")], listed)
        self.assertEqual(2, self.mock_client.request_deserialize.call_count)
        first, second = self.mock_client.request_deserialize.call_args_list
        self.assertEqual(
            {
                "action": "list",
                "name": "",
                "value": {
                    "prefix": "dir/",
                    "pagesize": 0,
                    "uuid": "",
                    "props": "name,size,version",
                    "continuation_token": "",
                },
            },
            first.kwargs["json"],
        )
        self.assertEqual(f"buckets/{BUCKET}", first.kwargs["path"])
        self.assertEqual(BucketList, first.kwargs["res_model"])
        self.assertEqual({HEADER_ACCEPT: MSGPACK_CONTENT_TYPE}, first.kwargs["headers"])
        self.assertEqual(self.params, first.kwargs["params"])
        self.assertEqual("uuid", second.kwargs["json"]["value"]["uuid"])
        self.assertEqual("page-2", second.kwargs["json"]["value"]["continuation_token"])

    def test_close(self):
        self.store.close()
        self.mock_client.session_manager.close.assert_called_once()

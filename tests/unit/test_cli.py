#
# Copyright (c) 2025, NVIDIA CORPORATION. All rights reserved.
#

import io
import json
import os
import unittest
from unittest.mock import patch

import requests
from botocore.exceptions import ProfileNotFound

from objcat.cli import build_parser, main
from objcat.const import DEFAULT_RETRY_COUNT
from objcat.provider import Provider
from objcat.version import __version__
from tests.const import BUCKET
from tests.fakes import OP_GET, InMemoryObjectStore
from tests.utils import BrokenSink, cases, random_bytes, records, s3_url


# pylint: disable=unused-variable
class TestCli(unittest.TestCase):
    def setUp(self) -> None:
        self.store = InMemoryObjectStore(max_latency=0.001, seed=5)
        self.stdout = io.TextIOWrapper(io.BytesIO())
        self.stderr = io.StringIO()

        patches = [
            patch.dict(os.environ, {}, clear=True),
            patch("objcat.cli.sys.stdout", self.stdout),
            patch("objcat.cli.sys.stderr", self.stderr),
        ]
        for patcher in patches:
            patcher.start()
            self.addCleanup(patcher.stop)
        store_patcher = patch("objcat.cli.store_from_config", return_value=self.store)
        self.store_from_config = store_patcher.start()
        self.addCleanup(store_patcher.stop)

    @property
    def output(self) -> bytes:
        return self.stdout.buffer.getvalue()

    def test_cat_single_object(self):
        self.store.put_object(BUCKET, "records.txt", records())
        self.assertEqual(0, main(["cat", s3_url("records.txt")]))
        self.assertEqual(records(), self.output)
        self.assertEqual("", self.stderr.getvalue())
        self.assertTrue(self.store.closed)

    def test_cat_small_parts(self):
        content = random_bytes(300, seed=9)
        self.store.put_object(BUCKET, "obj", content)
        self.assertEqual(0, main(["cat", s3_url("obj"), "-p", "1", "-c", "3"]))
        self.assertEqual(content, self.output)

    def test_cat_human_readable_part_size(self):
        self.store.put_object(BUCKET, "obj", b"abc")
        self.assertEqual(0, main(["cat", s3_url("obj"), "--part-size", "8MiB"]))
        self.assertEqual(b"abc", self.output)

    def test_cat_prefix_and_wildcard(self):
        self.store.put_object(BUCKET, "dir/log-file-2024-02", b"contentB")
        self.store.put_object(BUCKET, "dir/log-file-2024-01", b"contentA")
        self.store.put_object(BUCKET, "dir/other", b"other")
        self.assertEqual(0, main(["cat", s3_url("dir/log-file-2024-*")]))
        self.assertEqual(b"contentAcontentB", self.output)

    def test_store_created_for_target_provider(self):
        self.store.put_object(BUCKET, "obj", b"x")
        main(["cat", f"gs://{BUCKET}/obj"])
        _, kwargs = self.store_from_config.call_args
        self.assertEqual(Provider.GOOGLE, kwargs["provider"])
        self.assertEqual(DEFAULT_RETRY_COUNT + 1, kwargs["retry_config"].max_attempts)

    def test_store_pool_sized_for_concurrency(self):
        self.store.put_object(BUCKET, "obj", b"x")
        main(["cat", s3_url("obj"), "-c", "24"])
        _, kwargs = self.store_from_config.call_args
        self.assertEqual(24, kwargs["concurrency"])

    @cases(
        (
            ProfileNotFound(profile="no-such-profile"),
            "The config profile (no-such-profile) could not be found",
        ),
        (ValueError("bad endpoint"), "bad endpoint"),
    )
    def test_transport_creation_failure(self, test_case):
        error, message = test_case
        self.stderr.seek(0)
        self.stderr.truncate()
        self.store_from_config.side_effect = error
        target = s3_url("obj")
        self.assertEqual(1, main(["cat", target]))
        self.assertEqual(f'ERROR "cat {target}": {message}\n', self.stderr.getvalue())
        self.assertEqual(b"", self.output)

    def test_local_target_rejected_before_transport(self):
        self.assertEqual(1, main(["cat", "local/file.txt"]))
        self.assertEqual(
            'ERROR "cat local/file.txt": source must be a remote object\n',
            self.stderr.getvalue(),
        )
        self.assertEqual(b"", self.output)
        self.store_from_config.assert_not_called()

    def test_version_with_prefix_rejected(self):
        self.assertEqual(1, main(["cat", s3_url("dir/"), "--version-id", "v1"]))
        self.assertEqual(
            f'ERROR "cat {s3_url("dir/")}": wildcard/prefix operations are disabled with --version-id flag\n',
            self.stderr.getvalue(),
        )
        self.store_from_config.assert_not_called()

    def test_missing_object_json(self):
        self.store.create_bucket(BUCKET)
        target = s3_url("prefix/file.txt")
        self.assertEqual(1, main(["--json", "cat", target]))
        self.assertEqual(
            {
                "operation": "cat",
                "command": f"cat {target}",
                "error": 'object "prefix/file.txt" not found',
            },
            json.loads(self.stderr.getvalue()),
        )
        self.assertEqual(b"", self.output)

    @cases(["cat", s3_url("dir/*")], ["--json", "cat", s3_url("dir/*")])
    def test_no_match(self, argv):
        self.stderr.seek(0)
        self.stderr.truncate()
        self.store.create_bucket(BUCKET)
        self.assertEqual(1, main(argv))
        self.assertIn("no object found", self.stderr.getvalue())

    def test_empty_prefix_succeeds(self):
        self.store.create_bucket(BUCKET)
        self.assertEqual(0, main(["cat", s3_url("dir/")]))
        self.assertEqual(b"", self.output)
        self.assertEqual("", self.stderr.getvalue())

    def test_retry_count_exhausted(self):
        self.store.put_object(BUCKET, "dir/a", b"first")
        self.store.put_object(BUCKET, "dir/b", b"second")
        self.store.inject_failure(
            OP_GET, lambda: requests.ConnectionError("reset"), key="dir/b"
        )
        self.assertEqual(1, main(["--retry-count", "0", "cat", s3_url("dir/")]))
        # Bytes of earlier objects are kept
        self.assertEqual(b"first", self.output)
        stderr = self.stderr.getvalue()
        self.assertTrue(stderr.startswith(f'ERROR "cat {s3_url("dir/")}": giving up on'))
        self.assertIn("after 1 attempts", stderr)
        self.assertTrue(self.store.closed)

    def test_closed_output(self):
        self.store.put_object(BUCKET, "obj", random_bytes(100, seed=1))
        self.stdout = io.TextIOWrapper(BrokenSink(fail_after=0))
        with patch("objcat.cli.sys.stdout", self.stdout):
            self.assertEqual(1, main(["cat", s3_url("obj"), "-p", "10"]))
        # No envelope for a reader that went away
        self.assertEqual("", self.stderr.getvalue())
        self.assertTrue(self.store.closed)

    def test_invalid_environment(self):
        with patch.dict(os.environ, {"OBJCAT_CONCURRENCY": "0"}):
            self.assertEqual(1, main(["cat", s3_url("obj")]))
        self.assertIn("concurrency must be positive", self.stderr.getvalue())
        self.store_from_config.assert_not_called()

    def test_ais_backend_requires_endpoint(self):
        self.assertEqual(1, main(["--backend", "ais", "cat", s3_url("obj")]))
        self.assertIn("requires an endpoint", self.stderr.getvalue())
        self.store_from_config.assert_not_called()

    def test_no_operation(self):
        self.assertEqual(1, main([]))
        self.assertIn("usage: objcat", self.stderr.getvalue())

    @cases(["-p", "0"], ["-p", "lots"], ["-c", "0"], ["-c", "two"])
    def test_invalid_options_exit_with_usage(self, options):
        with self.assertRaises(SystemExit) as context:
            main(["cat", s3_url("obj"), *options])
        self.assertEqual(2, context.exception.code)

    def test_version(self):
        with patch("sys.stdout", new_callable=io.StringIO) as stdout:
            with self.assertRaises(SystemExit) as context:
                main(["--version"])
        self.assertEqual(0, context.exception.code)
        self.assertIn(__version__, stdout.getvalue())


class TestParser(unittest.TestCase):
    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            args = build_parser().parse_args(["cat", "s3://b/k"])
        self.assertEqual("cat", args.operation)
        self.assertEqual("s3://b/k", args.target)
        self.assertIsNone(args.part_size)
        self.assertIsNone(args.concurrency)
        self.assertIsNone(args.version_id)
        self.assertIsNone(args.retry_count)
        self.assertFalse(args.json)
        self.assertEqual("WARNING", args.log_level)

    def test_log_level_from_environment(self):
        with patch.dict(os.environ, {"OBJCAT_LOG_LEVEL": "debug"}, clear=True):
            args = build_parser().parse_args(["cat", "s3://b/k"])
        self.assertEqual("DEBUG", args.log_level)

    def test_part_size_parsing(self):
        parser = build_parser()
        self.assertEqual(1, parser.parse_args(["cat", "s3://b/k", "-p", "1"]).part_size)
        self.assertEqual(
            8 * 2**20, parser.parse_args(["cat", "s3://b/k", "-p", "8MiB"]).part_size
        )

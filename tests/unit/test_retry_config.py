#
# Copyright (c) 2025, NVIDIA CORPORATION. All rights reserved.
#

import unittest
from unittest.mock import Mock

from tenacity import wait_none
from urllib3.util.retry import Retry

from objcat.const import DEFAULT_RETRY_COUNT
from objcat.errors import NotFound, TransientFetchFailure
from objcat.retry_config import RetryConfig


class TestRetryConfig(unittest.TestCase):
    def test_default(self):
        config = RetryConfig.default()
        self.assertEqual(DEFAULT_RETRY_COUNT + 1, config.max_attempts)
        self.assertIsInstance(config.http_retry, Retry)
        self.assertIn(503, config.http_retry.status_forcelist)

    def test_invalid_attempts(self):
        with self.assertRaises(ValueError):
            RetryConfig(max_attempts=0)

    def test_retries_transient_until_success(self):
        func = Mock(side_effect=[TransientFetchFailure("a"), TransientFetchFailure("b"), "ok"])
        result = RetryConfig(max_attempts=3, wait=wait_none()).retrying()(func)
        self.assertEqual("ok", result)
        self.assertEqual(3, func.call_count)

    def test_reraises_last_failure(self):
        last = TransientFetchFailure("last")
        func = Mock(side_effect=[TransientFetchFailure("first"), last])
        with self.assertRaises(TransientFetchFailure) as context:
            RetryConfig(max_attempts=2, wait=wait_none()).retrying()(func)
        self.assertIs(last, context.exception)
        self.assertEqual(2, func.call_count)

    def test_single_attempt(self):
        func = Mock(side_effect=TransientFetchFailure("once"))
        with self.assertRaises(TransientFetchFailure):
            RetryConfig(max_attempts=1, wait=wait_none()).retrying()(func)
        func.assert_called_once()

    def test_other_errors_not_retried(self):
        func = Mock(side_effect=NotFound("key"))
        with self.assertRaises(NotFound):
            RetryConfig(max_attempts=5, wait=wait_none()).retrying()(func)
        func.assert_called_once()

    def test_retrying_is_fresh(self):
        config = RetryConfig()
        self.assertIsNot(config.retrying(), config.retrying())

    def test_network_errors_retried(self):
        func = Mock(side_effect=[ConnectionResetError("reset"), "ok"])
        result = RetryConfig(max_attempts=2, wait=wait_none()).retrying()(func)
        self.assertEqual("ok", result)
        self.assertEqual(2, func.call_count)

    def test_unknown_errors_not_retried(self):
        func = Mock(side_effect=KeyError("bug"))
        with self.assertRaises(KeyError):
            RetryConfig(max_attempts=5, wait=wait_none()).retrying()(func)
        func.assert_called_once()

"""
Copyright (c) 2025, NVIDIA CORPORATION. All rights reserved.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from urllib3.util.retry import Retry
from tenacity import (
    Retrying,
    retry_if_exception,
    before_sleep_log,
    wait_random_exponential,
    stop_after_attempt,
)

from objcat.const import DEFAULT_RETRY_COUNT, STATUS_RETRYABLE
from objcat.error_classifier import is_transient
from objcat.utils import get_logger

logger = get_logger(__name__)


def _default_wait():
    return wait_random_exponential(multiplier=0.1, max=10)


def _default_http_retry() -> Retry:
    return Retry(
        total=3,
        backoff_factor=0.5,
        status_forcelist=list(STATUS_RETRYABLE),
        connect=0,
        read=0,
    )


@dataclass(frozen=True)
class RetryConfig:
    """
    Configuration for retrying failed storage requests.

    Two layers of retry apply to each request:

    1. **HTTP Retry (urllib3.Retry)** - Handles throttling and server errors by status code (429, 5xx) inside the
       HTTP transport, before a response ever reaches the fetcher.
    2. **Request Retry (tenacity)** - Re-issues a whole range or listing request after a transient failure
       (connection reset, timeout, retryable status that survived layer 1). Each request gets at most
       `max_attempts` attempts; the last failure is re-raised once the ceiling is reached.

    **Attributes:**
        max_attempts (int): Retry ceiling, i.e. the maximum number of attempts per request (including the first).
        wait (Any): tenacity wait strategy applied between attempts.
        http_retry (urllib3.Retry): Status-code retry strategy mounted on pooled HTTP sessions.
    """

    max_attempts: int = DEFAULT_RETRY_COUNT + 1
    wait: Any = field(default_factory=_default_wait)
    http_retry: Retry = field(default_factory=_default_http_retry)

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")

    @staticmethod
    def default() -> "RetryConfig":
        """
        Returns the default retry configuration.
        """
        return RetryConfig()

    def retrying(self) -> Retrying:
        """
        Build a fresh `tenacity.Retrying` for a single request.

        Only failures that `is_transient` accepts are retried; any other error is raised immediately.

        Returns:
            tenacity.Retrying: Retrying instance that re-raises the last error after `max_attempts`.
        """
        return Retrying(
            wait=self.wait,
            stop=stop_after_attempt(self.max_attempts),
            retry=retry_if_exception(is_transient),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

"""
Copyright (c) 2025, NVIDIA CORPORATION. All rights reserved.
"""

import os
import threading
from typing import Dict, Optional, Tuple, Union
from multiprocessing import current_process

from requests import Session
from requests.adapters import HTTPAdapter
from urllib3 import Retry

from objcat.config import StoreConfig
from objcat.const import (
    AIS_CLIENT_CA,
    AIS_CLIENT_CRT,
    AIS_CLIENT_KEY,
    DEFAULT_MAX_POOL_SIZE,
    HTTP,
    HTTPS,
)
from objcat.retry_config import RetryConfig
from objcat.utils import get_logger

ClientCert = Union[str, Tuple[str, str]]

logger = get_logger(__name__)


class SessionManager:
    """
    Holds the pooled `requests` sessions that carry every gateway request, one session per process.

    TLS settings are resolved once, when the manager is created: explicit arguments win over the `AIS_CLIENT_CA`,
    `AIS_CRT` and `AIS_CRT_KEY` environment variables. The pool keeps at least `concurrency` connections per host,
    so the parallel range requests of one object never queue for a socket.

    Args:
        retry (urllib3.Retry, optional): Status-code retry strategy mounted on the session's adapters.
            Defaults to `RetryConfig.default().http_retry`.
        ca_cert (str, optional): Path to a CA certificate file for SSL verification
        skip_verify (bool, optional): If True, skip SSL certificate verification
        client_cert (Union[str, Tuple[str, str]], optional): Client certificate PEM file, or a (cert, key) pair,
            for mTLS
        max_pool_size (int, optional): Minimum number of pooled connections per host
        concurrency (int, optional): Range requests issued at once
    """

    # pylint: disable=too-many-arguments,too-many-positional-arguments
    def __init__(
        self,
        retry: Optional[Retry] = None,
        ca_cert: Optional[str] = None,
        skip_verify: bool = False,
        client_cert: Optional[ClientCert] = None,
        max_pool_size: int = DEFAULT_MAX_POOL_SIZE,
        concurrency: int = 1,
    ):
        self._retry = retry or RetryConfig.default().http_retry
        self._verify = _resolve_verify(ca_cert, skip_verify)
        self._client_cert = client_cert or _client_cert_from_env()
        self._pool_size = max(max_pool_size, concurrency)
        self._lock = threading.Lock()
        self._sessions: Dict[int, Session] = {}

    @classmethod
    def from_config(
        cls,
        config: StoreConfig,
        retry: Optional[Retry] = None,
        concurrency: int = 1,
    ) -> "SessionManager":
        """
        Create a session manager from transport settings.

        Args:
            config (StoreConfig): Supplies TLS and pool settings
            retry (urllib3.Retry, optional): Status-code retry strategy
            concurrency (int, optional): Range requests issued at once

        Returns:
            SessionManager: Manager with no session opened yet
        """
        return cls(
            retry=retry,
            ca_cert=config.ca_cert,
            skip_verify=config.skip_verify,
            max_pool_size=config.max_pool_size,
            concurrency=concurrency,
        )

    @property
    def retry(self) -> Retry:
        return self._retry

    @property
    def verify(self) -> Union[bool, str]:
        """False, a CA bundle path, or True for the system CA list."""
        return self._verify

    @property
    def client_cert(self) -> Optional[ClientCert]:
        return self._client_cert

    @property
    def pool_size(self) -> int:
        return self._pool_size

    @property
    def session(self) -> Session:
        """Session of the current process, opened on first use."""
        pid = current_process().pid
        with self._lock:
            session = self._sessions.get(pid)
            if session is None:
                session = self._open_session()
                self._sessions[pid] = session
            return session

    def close(self):
        """Close every open session; the next request opens a new one."""
        with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
        for session in sessions:
            session.close()

    def _open_session(self) -> Session:
        logger.debug("Opening HTTP session (pool: %d)", self._pool_size)
        session = Session()
        session.verify = self._verify
        session.cert = self._client_cert
        adapter = HTTPAdapter(
            max_retries=self._retry,
            pool_connections=self._pool_size,
            pool_maxsize=self._pool_size,
        )
        for protocol in (HTTP, HTTPS):
            session.mount(protocol, adapter)
        return session


def _resolve_verify(ca_cert: Optional[str], skip_verify: bool) -> Union[bool, str]:
    if skip_verify:
        return False
    if ca_cert:
        return ca_cert
    return os.getenv(AIS_CLIENT_CA) or True


def _client_cert_from_env() -> Optional[Tuple[str, str]]:
    cert = os.getenv(AIS_CLIENT_CRT)
    key = os.getenv(AIS_CLIENT_KEY)
    return (cert, key) if cert and key else None

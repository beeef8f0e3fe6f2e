#
# Copyright (c) 2025, NVIDIA CORPORATION. All rights reserved.
#

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

from objcat.const import (
    AIS_AUTHN_TOKEN,
    AIS_CLIENT_CA,
    AIS_ENDPOINT,
    AWS_ENDPOINT_URL,
    AWS_PROFILE,
    AWS_REGION,
    BACKEND_AIS,
    BACKEND_S3,
    DEFAULT_CONCURRENCY,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_MAX_POOL_SIZE,
    DEFAULT_PART_SIZE,
    DEFAULT_READ_TIMEOUT,
    ENV_BACKEND,
    ENV_CONCURRENCY,
    ENV_PART_SIZE,
    ENV_REQUEST_TIMEOUT,
    ENV_RETRY_COUNT,
    S3_ENDPOINT_URL,
)
from objcat.retry_config import RetryConfig
from objcat.utils import parse_size

Timeout = Union[float, Tuple[float, float]]


@dataclass(frozen=True)
class CatConfig:
    """
    Parameters governing how a `cat` invocation plans and fetches object bytes.

    Passed by value into the resolver, planner and fetcher; nothing reads process-wide state once this is built.

    **Attributes:**
        part_size (int): Maximum size in bytes of a single range request.
        concurrency (int): Maximum number of range requests in flight (or buffered) per object.
        retry_config (RetryConfig): Retry ceiling and backoff applied to every request.
    """

    part_size: int = DEFAULT_PART_SIZE
    concurrency: int = DEFAULT_CONCURRENCY
    retry_config: RetryConfig = field(default_factory=RetryConfig.default)

    def __post_init__(self):
        if self.part_size <= 0:
            raise ValueError(f"part_size must be positive, got {self.part_size}")
        if self.concurrency <= 0:
            raise ValueError(f"concurrency must be positive, got {self.concurrency}")

    @staticmethod
    def from_env(**overrides) -> CatConfig:
        """
        Build a config from `OBJCAT_*` environment variables, with keyword overrides taking precedence.

        Environment Variables:
            - OBJCAT_PART_SIZE (bytes or human-readable, e.g. "8MiB"; default: 50MiB)
            - OBJCAT_CONCURRENCY (default: 5)
            - OBJCAT_RETRY_COUNT (retries after the first attempt; default: 10)

        Returns:
            Validated CatConfig

        Raises:
            ValueError: If any value is malformed or not positive
        """
        part_size = os.getenv(ENV_PART_SIZE)
        concurrency = os.getenv(ENV_CONCURRENCY)
        retry_count = os.getenv(ENV_RETRY_COUNT)

        values = {}
        if part_size:
            values["part_size"] = parse_size(part_size)
        if concurrency:
            values["concurrency"] = int(concurrency)
        if retry_count:
            values["retry_config"] = RetryConfig(max_attempts=int(retry_count) + 1)
        values.update({k: v for k, v in overrides.items() if v is not None})
        return CatConfig(**values)


@dataclass(frozen=True)
class StoreConfig:
    """
    Settings for the storage transport.

    **Attributes:**
        backend (str): "s3" to talk to an S3-compatible service directly, "ais" to go through an AIStore gateway.
        endpoint (str, optional): Service endpoint; for "ais" this is required.
        timeout (Timeout): Per-request timeout in seconds, a float or a (connect, read) tuple.
        max_pool_size (int): Connections kept per host; shared by all concurrent range requests.
        skip_verify (bool): Skip TLS certificate verification.
        ca_cert (str, optional): CA bundle for TLS verification.
        token (str, optional): AIS AuthN token.
        profile (str, optional): AWS profile name.
        region (str, optional): AWS region.
    """

    backend: str = BACKEND_S3
    endpoint: Optional[str] = None
    timeout: Timeout = (DEFAULT_CONNECT_TIMEOUT, DEFAULT_READ_TIMEOUT)
    max_pool_size: int = DEFAULT_MAX_POOL_SIZE
    skip_verify: bool = False
    ca_cert: Optional[str] = None
    token: Optional[str] = None
    profile: Optional[str] = None
    region: Optional[str] = None

    def __post_init__(self):
        if self.backend not in (BACKEND_S3, BACKEND_AIS):
            raise ValueError(f"Unknown backend: {self.backend}")
        if self.backend == BACKEND_AIS and not self.endpoint:
            raise ValueError(f"The {BACKEND_AIS} backend requires an endpoint ({AIS_ENDPOINT})")
        if self.max_pool_size <= 0:
            raise ValueError(f"max_pool_size must be positive, got {self.max_pool_size}")

    @staticmethod
    def from_env(**overrides) -> StoreConfig:
        """
        Build a transport config from the environment, with keyword overrides taking precedence.

        Environment Variables:
            - OBJCAT_BACKEND ("s3" or "ais"; default: "ais" if AIS_ENDPOINT is set, else "s3")
            - AIS_ENDPOINT, AIS_AUTHN_TOKEN, AIS_CLIENT_CA
            - S3_ENDPOINT_URL or AWS_ENDPOINT_URL, AWS_PROFILE, AWS_REGION
            - OBJCAT_REQUEST_TIMEOUT (read timeout in seconds)

        Returns:
            Validated StoreConfig
        """
        overrides = {k: v for k, v in overrides.items() if v is not None}
        backend = overrides.pop("backend", None) or os.getenv(ENV_BACKEND)
        if not backend:
            backend = BACKEND_AIS if os.getenv(AIS_ENDPOINT) else BACKEND_S3

        values = {"backend": backend}
        if backend == BACKEND_AIS:
            values["endpoint"] = os.getenv(AIS_ENDPOINT)
            values["token"] = os.getenv(AIS_AUTHN_TOKEN)
            values["ca_cert"] = os.getenv(AIS_CLIENT_CA)
        else:
            values["endpoint"] = os.getenv(S3_ENDPOINT_URL) or os.getenv(AWS_ENDPOINT_URL)
            values["profile"] = os.getenv(AWS_PROFILE)
            values["region"] = os.getenv(AWS_REGION)

        read_timeout = os.getenv(ENV_REQUEST_TIMEOUT)
        if read_timeout:
            values["timeout"] = (DEFAULT_CONNECT_TIMEOUT, float(read_timeout))

        values.update(overrides)
        return StoreConfig(**values)

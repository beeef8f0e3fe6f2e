#
# Copyright (c) 2025, NVIDIA CORPORATION. All rights reserved.
#

from typing import Optional

from objcat.config import StoreConfig
from objcat.const import BACKEND_AIS
from objcat.provider import Provider
from objcat.retry_config import RetryConfig
from objcat.store.ais import AISObjectStore
from objcat.store.base import ObjectStore
from objcat.store.s3 import S3ObjectStore


def store_from_config(
    config: StoreConfig,
    provider: Provider = Provider.AMAZON,
    retry_config: Optional[RetryConfig] = None,
    concurrency: int = 1,
) -> ObjectStore:
    """
    Create the transport named by `config.backend`.

    Args:
        config (StoreConfig): Transport settings
        provider (Provider, optional): Provider of the target's bucket, used by the AIS gateway to route requests
        retry_config (RetryConfig, optional): Supplies the status-code retry for HTTP sessions
        concurrency (int, optional): Range requests issued at once; the connection pool is at least this large

    Returns:
        ObjectStore: S3ObjectStore or AISObjectStore
    """
    if config.backend == BACKEND_AIS:
        return AISObjectStore(
            config,
            provider=provider,
            retry_config=retry_config,
            concurrency=concurrency,
        )
    return S3ObjectStore(config, concurrency=concurrency)

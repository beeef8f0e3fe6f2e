#
# Copyright (c) 2025, NVIDIA CORPORATION. All rights reserved.
#

from objcat.store.base import ObjectStore
from objcat.store.factory import store_from_config

__all__ = [
    "ObjectStore",
    "store_from_config",
]

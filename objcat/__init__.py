#
# Copyright (c) 2025, NVIDIA CORPORATION. All rights reserved.
#

from objcat.version import __version__
from objcat.config import CatConfig, StoreConfig
from objcat.pipeline import ConcatPipeline
from objcat.types import ObjectDescriptor, Target

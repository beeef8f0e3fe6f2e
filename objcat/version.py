#
# Copyright (c) 2025, NVIDIA CORPORATION. All rights reserved.
#

__version__ = "0.1.0"

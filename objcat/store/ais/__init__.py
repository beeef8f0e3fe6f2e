#
# Copyright (c) 2025, NVIDIA CORPORATION. All rights reserved.
#

from objcat.store.ais.request_client import RequestClient
from objcat.store.ais.response_handler import AISResponseHandler, ResponseHandler
from objcat.store.ais.session_manager import SessionManager
from objcat.store.ais.store import AISObjectStore

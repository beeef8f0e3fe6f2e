#
# Copyright (c) 2022-2025, NVIDIA CORPORATION. All rights reserved.
#

import logging
import re
from typing import Optional, Tuple, Type, TypeVar, Union

import humanfriendly
import humanize
import requests

from msgspec import msgpack
from pydantic import BaseModel, TypeAdapter

from objcat.const import (
    HEADER_CONTENT_TYPE,
    MSGPACK_CONTENT_TYPE,
    DEFAULT_LOG_FORMAT,
)
from objcat.provider import Provider, provider_aliases

T = TypeVar("T")
LOGGER_NAMESPACE = "objcat"

# URL parsing regex components
URL_PROVIDERS = "|".join([p.value for p in Provider] + list(provider_aliases))
MAX_BUCKET_PART_LEN = (
    132  # Accommodates constraint of @uuid(32)#namespace(32)/bucket(64)
)
BUCKET_CHARS = r"[A-Za-z0-9@#._-]"


class HttpError(BaseModel):
    """
    Represents an error returned by the API.
    """

    status_code: int
    message: str = ""
    method: str = ""
    url_path: str = ""


def get_logger(name: str, log_format: str = DEFAULT_LOG_FORMAT):
    """
    Create or retrieve a logger with the specified configuration.

    Args:
        name (str): The name of the logger.
        log_format (str, optional): Logging format.

    Returns:
        logging.Logger: Configured logger instance.
    """
    logger = logging.getLogger(name)
    if not logger.hasHandlers():
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(log_format))
        logger.addHandler(handler)
    logger.propagate = False
    return logger


def set_log_level(level: Union[int, str]):
    """
    Apply a log level to every logger created for this package.

    Args:
        level (Union[int, str]): Level name (e.g. "DEBUG") or number
    """
    if isinstance(level, str):
        level = level.upper()
    for name, logger in logging.Logger.manager.loggerDict.items():
        if name.startswith(LOGGER_NAMESPACE) and isinstance(logger, logging.Logger):
            logger.setLevel(level)
    logging.getLogger(LOGGER_NAMESPACE).setLevel(level)


def decode_response(
    res_model: Type[T],
    resp: requests.Response,
) -> T:
    """
    Parse response content from the cluster into a Python class,
     decoding with msgpack depending on content type in header

    Args:
        res_model (Type[T]): Resulting type to which the response should be deserialized
        resp (Response): Response from the AIS cluster

    """
    if resp.headers.get(HEADER_CONTENT_TYPE) == MSGPACK_CONTENT_TYPE:
        return msgpack.decode(resp.content, type=res_model)
    return TypeAdapter(res_model).validate_json(resp.text)


def parse_size(size: Union[int, str]) -> int:
    """
    Parse a size given as a number of bytes or a human-readable string

    Args:
        size (Union[int, str]): e.g. 1024, "7", "8MiB", "5 MB"

    Returns:
        Size in bytes

    Raises:
        ValueError: If `size` is not a recognizable size
    """
    if isinstance(size, int):
        return size
    try:
        return humanfriendly.parse_size(size, binary=True)
    except humanfriendly.InvalidSize as err:
        raise ValueError(str(err)) from err


def natural_size(size: int) -> str:
    """
    Render a byte count for log messages
    """
    return humanize.naturalsize(size, binary=True)


def extract_and_parse_url(msg: str) -> Optional[Tuple[str, str, bool]]:
    """
    Extract provider, bucket, and whether an object is present from raw string.

    Args:
        msg (str): Any string that may contain a bucket URL, e.g. an error message from AIS.

    Returns:
        Optional[Tuple[str, str, bool]]: (prov, bck, has_obj) if a URL is found, otherwise None.
    """
    pattern = rf"({URL_PROVIDERS})://({BUCKET_CHARS}{{1,{MAX_BUCKET_PART_LEN}}})(?:(/)|(?!{BUCKET_CHARS}))"
    match = re.search(pattern, msg)
    if not match:
        return None
    return match.group(1), match.group(2), bool(match.group(3))

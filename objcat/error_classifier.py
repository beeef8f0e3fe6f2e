#
# Copyright (c) 2025, NVIDIA CORPORATION. All rights reserved.
#

import socket
from typing import Optional

import requests
import urllib3.exceptions
from botocore import exceptions as boto_exceptions

from objcat.const import STATUS_NOT_FOUND, STATUS_RETRYABLE
from objcat.errors import (
    AISRetryableError,
    APIRequestError,
    CatError,
    ErrBckNotFound,
    ErrRemoteBckNotFound,
    FatalFetchFailure,
    InvalidBckProvider,
    NotFound,
    SourceTypeError,
    TransientFetchFailure,
    VersionNotFound,
)

# Network failures that may succeed when the request is re-issued
NETWORK_RETRY_EXCEPTIONS = (
    requests.ConnectionError,
    requests.Timeout,
    requests.exceptions.ChunkedEncodingError,
    urllib3.exceptions.TimeoutError,
    urllib3.exceptions.ProtocolError,
    boto_exceptions.ConnectionError,
    boto_exceptions.HTTPClientError,
    ConnectionError,
    TimeoutError,
    socket.timeout,
    AISRetryableError,
)

S3_NOT_FOUND_CODES = {"NoSuchKey", "NotFound", "404"}
S3_BUCKET_NOT_FOUND_CODES = {"NoSuchBucket"}
S3_VERSION_NOT_FOUND_CODES = {"NoSuchVersion"}
S3_INVALID_VERSION_CODES = {"InvalidArgument", "400"}
# IfMatch no longer holds: the object was replaced after it was listed or looked up
S3_PRECONDITION_CODES = {"PreconditionFailed", "412"}
S3_RETRYABLE_CODES = {
    "RequestTimeout",
    "RequestTimeoutException",
    "InternalError",
    "ServiceUnavailable",
    "SlowDown",
    "Throttling",
    "ThrottlingException",
    "RequestLimitExceeded",
}


def classify(
    exc: BaseException,
    bucket: str = "",
    key: str = "",
    version_id: Optional[str] = None,
) -> CatError:
    """
    Map any failure raised while resolving or fetching into the error taxonomy.

    Args:
        exc (BaseException): Failure to classify
        bucket (str, optional): Bucket being accessed, used to word not-found messages
        key (str, optional): Object key being accessed, used to word not-found messages
        version_id (str, optional): Pinned version, if any

    Returns:
        CatError: `exc` itself if already classified, otherwise a new classified error chained to `exc` by the caller
    """
    if isinstance(exc, CatError):
        return exc
    if isinstance(exc, InvalidBckProvider):
        return SourceTypeError()
    if isinstance(exc, boto_exceptions.ClientError):
        return _classify_client_error(exc, bucket, key, version_id)
    if isinstance(exc, (ErrBckNotFound, ErrRemoteBckNotFound)):
        return NotFound("", bucket)
    if isinstance(exc, NETWORK_RETRY_EXCEPTIONS):
        return TransientFetchFailure(_describe(exc))
    if isinstance(exc, APIRequestError):
        if exc.status_code == STATUS_NOT_FOUND:
            return _not_found(bucket, key, version_id)
        if exc.status_code in STATUS_RETRYABLE:
            return TransientFetchFailure(_describe(exc))
    return FatalFetchFailure(_describe(exc))


def is_transient(exc: BaseException) -> bool:
    """
    Whether re-issuing the failed request might succeed.
    """
    return isinstance(classify(exc), TransientFetchFailure)


def _classify_client_error(
    exc: boto_exceptions.ClientError,
    bucket: str,
    key: str,
    version_id: Optional[str],
) -> CatError:
    error = exc.response.get("Error", {})
    code = str(error.get("Code", ""))
    status = exc.response.get("ResponseMetadata", {}).get("HTTPStatusCode", 0)

    if code in S3_VERSION_NOT_FOUND_CODES:
        return VersionNotFound(key, version_id or "")
    # malformed version ids are rejected with 400 rather than 404
    if version_id and code in S3_INVALID_VERSION_CODES:
        return VersionNotFound(key, version_id)
    if code in S3_PRECONDITION_CODES:
        return FatalFetchFailure(f'object "{key}" changed while it was being read')
    if code in S3_BUCKET_NOT_FOUND_CODES:
        return NotFound("", bucket)
    if code in S3_NOT_FOUND_CODES or status == STATUS_NOT_FOUND:
        return _not_found(bucket, key, version_id)
    if code in S3_RETRYABLE_CODES or status in STATUS_RETRYABLE:
        return TransientFetchFailure(_describe(exc))
    return FatalFetchFailure(_describe(exc))


def _not_found(bucket: str, key: str, version_id: Optional[str]) -> CatError:
    if version_id:
        return VersionNotFound(key, version_id)
    return NotFound(key, bucket)


def _describe(exc: BaseException) -> str:
    text = str(exc)
    name = type(exc).__name__
    return f"{name}: {text}" if text else name

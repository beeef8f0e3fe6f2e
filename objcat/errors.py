#
# Copyright (c) 2018-2025, NVIDIA CORPORATION. All rights reserved.
#

from enum import Enum

from objcat.const import MSG_NO_OBJECT_FOUND, MSG_SOURCE_NOT_REMOTE, MSG_VERSION_SCOPE


class ErrorKind(Enum):
    """
    Error taxonomy reported to the output layer. Every failure of a `cat` invocation is classified as exactly one
    of these kinds.
    """

    SOURCE_TYPE = "SourceTypeError"
    INVALID_VERSION_SCOPE = "InvalidVersionScope"
    NO_MATCH = "NoMatch"
    NOT_FOUND = "NotFound"
    VERSION_NOT_FOUND = "VersionNotFound"
    TRANSIENT_FETCH_FAILURE = "TransientFetchFailure"
    FATAL_FETCH_FAILURE = "FatalFetchFailure"


class CatError(Exception):
    """
    Base class for all classified errors raised while resolving or fetching objects

    Args:
        message (str): Human-readable message written to the error envelope
    """

    kind: ErrorKind = ErrorKind.FATAL_FETCH_FAILURE

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class SourceTypeError(CatError):
    """
    Raised when the target is not a remote object path
    """

    kind = ErrorKind.SOURCE_TYPE

    def __init__(self, message: str = MSG_SOURCE_NOT_REMOTE):
        super().__init__(message)


class InvalidVersionScope(CatError):
    """
    Raised when a version id is combined with a prefix or wildcard target
    """

    kind = ErrorKind.INVALID_VERSION_SCOPE

    def __init__(self, message: str = MSG_VERSION_SCOPE):
        super().__init__(message)


class NoMatch(CatError):
    """
    Raised when a wildcard target matches zero objects
    """

    kind = ErrorKind.NO_MATCH

    def __init__(self, message: str = MSG_NO_OBJECT_FOUND):
        super().__init__(message)


class NotFound(CatError):
    """
    Raised when a named object (or the bucket holding it) does not exist
    """

    kind = ErrorKind.NOT_FOUND

    def __init__(self, key: str, bucket: str = ""):
        self.key = key
        self.bucket = bucket
        what = f'object "{key}"' if key else f'bucket "{bucket}"'
        super().__init__(f"{what} not found")


class VersionNotFound(CatError):
    """
    Raised when the requested version of an object does not exist
    """

    kind = ErrorKind.VERSION_NOT_FOUND

    def __init__(self, key: str, version_id: str):
        self.key = key
        self.version_id = version_id
        super().__init__(f'version "{version_id}" of object "{key}" not found')


class TransientFetchFailure(CatError):
    """
    Raised for a recoverable I/O failure on a single request; retried internally
    """

    kind = ErrorKind.TRANSIENT_FETCH_FAILURE


class FatalFetchFailure(CatError):
    """
    Raised when an object cannot be fetched, either because the retry ceiling was exceeded or because the failure
    is not recoverable
    """

    kind = ErrorKind.FATAL_FETCH_FAILURE


class APIRequestError(Exception):
    """
    Base class for errors from HTTP servers, e.g. AIS
    """

    def __init__(self, status_code: int, message: str, req_url: str):
        self.status_code = status_code
        self.message = message
        self.req_url = req_url
        super().__init__(f"STATUS:{status_code}, MESSAGE:{message}, REQ_URL:{req_url}")


class AISError(APIRequestError):
    """
    Raised when an error is encountered from a query to the AIS cluster
    """


class AISRetryableError(AISError):
    """
    Exception raised for AIStore related errors that may resolve by retrying.
    """


# pylint: disable=unused-variable
class InvalidBckProvider(Exception):
    """
    Raised when the bucket provider is invalid for the requested operation
    """

    def __init__(self, provider):
        super().__init__(f"Invalid bucket provider: '{provider}'")


# pylint: disable=unused-variable
class ErrRemoteBckNotFound(AISError):
    """
    Raised when a remote bucket its required and missing for the requested operation
    """


# pylint: disable=unused-variable
class ErrBckNotFound(AISError):
    """
    Raised when a bucket is expected and not found
    """


# pylint: disable=unused-variable
class ErrObjNotFound(AISError):
    """
    Raised when an object is expected and not found
    """


class ErrGETConflict(AISRetryableError):
    """
    Raised when a GET conflicts with a concurrent write of the same object, e.g. a cold GET in progress
    """

#
# Copyright (c) 2025, NVIDIA CORPORATION. All rights reserved.
#

import io
import random
import string
from itertools import product
from typing import Type
from unittest import TestCase

import requests
from botocore.exceptions import ClientError

from objcat.const import UTF_ENCODING
from objcat.store.ais.response_handler import ResponseHandler
from tests.const import BUCKET, RECORD_COUNT, RECORD_SIZE, S3_SCHEME


def cases(*args):
    def decorator(func):
        def wrapper(self, *inner_args, **kwargs):
            for arg in args:
                with self.subTest(arg=arg):
                    func(self, arg, *inner_args, **kwargs)

        return wrapper

    return decorator


def case_matrix(*args_list):
    def decorator(func):
        def wrapper(self, *inner_args, **kwargs):
            for args in product(*args_list):
                with self.subTest(args=args):
                    func(self, *args, *inner_args, **kwargs)

        return wrapper

    return decorator


# pylint: disable=unused-variable
def random_string(length: int = 10) -> str:
    return "".join(random.choices(string.ascii_lowercase, k=length))


def random_bytes(length: int, seed: int = 0) -> bytes:
    rng = random.Random(seed)
    return bytes(rng.getrandbits(8) for _ in range(length))


def s3_url(key: str, bucket: str = BUCKET) -> str:
    return f"{S3_SCHEME}{bucket}/{key}"


def records(count: int = RECORD_COUNT, size: int = RECORD_SIZE) -> bytes:
    """Newline-delimited fixed-size records, e.g. b"rec-0000\\n" ..."""
    width = size - len("rec-") - 1
    return b"".join(
        f"rec-{idx:0{width}d}\n".encode(UTF_ENCODING) for idx in range(count)
    )


def create_api_error_response(
    req_url: str, status: int, msg: str, method: str = "GET"
) -> requests.Response:
    """
    Given test details, manually generate a requests.Response object

    Args:
        req_url (str): Original request url
        status (int): Response HTTP status code
        msg (str): Response text content
        method (str): Original request method

    Returns: requests.Response containing the given details
    """
    req = requests.Request()
    req.url = req_url
    req.method = method
    response = requests.Response()
    response.status_code = status
    # pylint: disable=protected-access
    response._content = msg.encode(UTF_ENCODING)
    response.request = req
    return response


def create_client_error(
    code: str, status: int = 400, operation: str = "GetObject"
) -> ClientError:
    return ClientError(
        {
            "Error": {"Code": code, "Message": f"{code} message"},
            "ResponseMetadata": {"HTTPStatusCode": status},
        },
        operation,
    )


def handler_parse_and_assert(
    test: TestCase,
    handler: ResponseHandler,
    base_exc: Type[Exception],
    test_case: tuple,
):
    """
    Feed a failed response through `handler` and check the raised error type and status.

    Args:
        test (TestCase): Running test
        handler (ResponseHandler): Handler under test
        base_exc (Type[Exception]): Class every parsed error must derive from
        test_case (tuple): (message, expected error class, status code)
    """
    message, expected_exc, status = test_case
    status = status or 500
    response = create_api_error_response("http://any/v1/objects", status, message)
    err = handler.parse_error(response)
    test.assertIsInstance(err, base_exc)
    test.assertEqual(expected_exc, type(err))
    test.assertEqual(status, err.status_code)


class BrokenSink(io.BytesIO):
    """
    Binary sink that stops accepting data after `fail_after` writes, like a pipe whose reader has gone.
    """

    def __init__(self, fail_after: int):
        super().__init__()
        self.fail_after = fail_after
        self.write_count = 0

    def write(self, data) -> int:
        if self.write_count >= self.fail_after:
            raise BrokenPipeError(32, "Broken pipe")
        self.write_count += 1
        return super().write(data)

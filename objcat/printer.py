#
# Copyright (c) 2025, NVIDIA CORPORATION. All rights reserved.
#

import json
from typing import TextIO

from objcat.const import OPERATION_CAT


def format_command(target: str, operation: str = OPERATION_CAT) -> str:
    return f"{operation} {target}"


def format_error(
    target: str, message: str, structured: bool = False, operation: str = OPERATION_CAT
) -> str:
    """
    Render the error envelope for a failed invocation.

    Args:
        target (str): Target exactly as given on the command line
        message (str): Error message
        structured (bool, optional): Render as a single-line JSON object instead of plain text
        operation (str, optional): Operation name

    Returns:
        str: Envelope without a trailing newline, e.g.
            `ERROR "cat s3://b/k": object "k" not found` or
            `{"operation":"cat","command":"cat s3://b/k","error":"object \\"k\\" not found"}`
    """
    command = format_command(target, operation)
    if structured:
        return json.dumps(
            {"operation": operation, "command": command, "error": message},
            separators=(",", ":"),
            ensure_ascii=False,
        )
    return f'ERROR "{command}": {message}'


def print_error(
    stream: TextIO,
    target: str,
    message: str,
    structured: bool = False,
    operation: str = OPERATION_CAT,
):
    stream.write(format_error(target, message, structured, operation) + "\n")
    stream.flush()

#
# Copyright (c) 2025, NVIDIA CORPORATION. All rights reserved.
#

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from objcat.const import MSG_WILDCARD_BUCKET, PATH_SEPARATOR, SCHEME_SEPARATOR
from objcat.errors import InvalidBckProvider, InvalidVersionScope, SourceTypeError
from objcat.provider import Provider
from objcat.types import Target
from objcat.wildcard import has_wildcard


class TargetKind(Enum):
    """
    Shape of a remote target, decided once up front from the path expression.
    """

    KEY = "key"
    PREFIX = "prefix"
    WILDCARD = "wildcard"


@dataclass(frozen=True)
class ParsedTarget:
    """
    A target split into its parts and tagged with its kind.

    For KEY targets `key` is the object name, for PREFIX targets it is the listing prefix (possibly empty for a
    bucket root) and for WILDCARD targets it is the glob pattern relative to the bucket.
    """

    kind: TargetKind
    provider: Provider
    bucket: str
    key: str
    version_id: Optional[str] = None
    raw: str = ""


def parse_target(target: Target) -> ParsedTarget:
    """
    Validate a user target and classify it as a single key, a prefix or a wildcard pattern.

    Performs no I/O.

    Args:
        target (Target): Raw user request

    Returns:
        ParsedTarget: Tagged target

    Raises:
        SourceTypeError: The path is not a remote object path (no scheme, unknown scheme, no bucket, or a wildcard
            in the bucket name)
        InvalidVersionScope: A version id was given for a prefix or wildcard target
    """
    path_spec = target.path_spec
    if SCHEME_SEPARATOR not in path_spec:
        raise SourceTypeError()
    scheme, rest = path_spec.split(SCHEME_SEPARATOR, 1)
    try:
        provider = Provider.parse(scheme)
    except InvalidBckProvider as err:
        raise SourceTypeError() from err

    bucket, _, key = rest.partition(PATH_SEPARATOR)
    if not bucket:
        raise SourceTypeError()
    if has_wildcard(bucket):
        raise SourceTypeError(MSG_WILDCARD_BUCKET)

    if has_wildcard(key):
        kind = TargetKind.WILDCARD
    elif key == "" or key.endswith(PATH_SEPARATOR):
        kind = TargetKind.PREFIX
    else:
        kind = TargetKind.KEY

    version_id = target.version_id or None
    if version_id and kind != TargetKind.KEY:
        raise InvalidVersionScope()

    return ParsedTarget(
        kind=kind,
        provider=provider,
        bucket=bucket,
        key=key,
        version_id=version_id,
        raw=path_spec,
    )

#
# Copyright (c) 2025, NVIDIA CORPORATION. All rights reserved.
#

from typing import Callable, List, Optional

from objcat.const import PATH_SEPARATOR
from objcat.error_classifier import classify
from objcat.errors import CatError, FatalFetchFailure, NoMatch, TransientFetchFailure
from objcat.retry_config import RetryConfig
from objcat.store.base import ObjectStore
from objcat.target import ParsedTarget, TargetKind, parse_target
from objcat.types import ListedObject, ObjectDescriptor, Target
from objcat.utils import get_logger
from objcat.wildcard import GlobMatcher, WildcardMatcher, literal_prefix

logger = get_logger(__name__)


class TargetResolver:
    """
    Expands a user target into the ordered list of objects to read.

    Args:
        store (ObjectStore): Storage capability used for listing
        matcher (WildcardMatcher, optional): Glob predicate for wildcard targets. Defaults to GlobMatcher.
        retry_config (RetryConfig, optional): Retry policy for listing requests
    """

    def __init__(
        self,
        store: ObjectStore,
        matcher: Optional[WildcardMatcher] = None,
        retry_config: Optional[RetryConfig] = None,
    ):
        self._store = store
        self._matcher = matcher or GlobMatcher()
        self._retry_config = retry_config or RetryConfig.default()

    def resolve(self, target: Target) -> List[ObjectDescriptor]:
        """
        Resolve a target into object descriptors sorted by key.

        - A single key resolves to one descriptor without checking that the object exists.
        - A prefix (trailing "/" or bucket root) resolves to the objects directly under it; none is a valid, empty
          result.
        - A wildcard pattern resolves to the matching objects; none raises NoMatch.
        - Listed objects keep the version and entity tag seen in the listing, so they are read as listed.

        Args:
            target (Target): Raw user request

        Returns:
            List[ObjectDescriptor]: Objects in ascending key order

        Raises:
            SourceTypeError: Target is not a remote object path
            InvalidVersionScope: Version id combined with a prefix or wildcard
            NoMatch: Wildcard matched nothing
            NotFound: Listed bucket does not exist
            FatalFetchFailure: Listing failed beyond the retry ceiling
        """
        parsed = parse_target(target)
        if parsed.kind == TargetKind.KEY:
            logger.debug("Resolved '%s' as a single key", parsed.raw)
            return [
                ObjectDescriptor(
                    provider=parsed.provider,
                    bucket=parsed.bucket,
                    key=parsed.key,
                    version_id=parsed.version_id,
                )
            ]

        if parsed.kind == TargetKind.PREFIX:
            prefix = parsed.key
            listed = self._list(parsed, prefix, lambda key: _is_direct_child(prefix, key))
        else:
            pattern = parsed.key
            listed = self._list(
                parsed,
                literal_prefix(pattern),
                lambda key: self._matcher.matches(pattern, key),
            )
            if not listed:
                raise NoMatch()

        logger.debug(
            "Resolved %s '%s' to %d object(s)", parsed.kind.value, parsed.raw, len(listed)
        )
        return [
            ObjectDescriptor(
                provider=parsed.provider,
                bucket=parsed.bucket,
                key=entry.key,
                size=entry.size,
                version_id=entry.version_id or None,
                etag=entry.etag or None,
            )
            for entry in listed
        ]

    def _list(
        self, parsed: ParsedTarget, prefix: str, keep: Callable[[str], bool]
    ) -> List[ListedObject]:
        def list_once():
            try:
                return [
                    entry
                    for entry in self._store.list_objects(parsed.bucket, prefix)
                    if keep(entry.key)
                ]
            except CatError:
                raise
            except Exception as err:
                raise classify(err, bucket=parsed.bucket) from err

        try:
            listed = self._retry_config.retrying()(list_once)
        except TransientFetchFailure as err:
            raise FatalFetchFailure(err.message) from err
        return sorted(listed, key=lambda entry: entry.key)


def _is_direct_child(prefix: str, key: str) -> bool:
    rest = key[len(prefix) :]
    return key.startswith(prefix) and rest != "" and PATH_SEPARATOR not in rest


#
# Copyright (c) 2025, NVIDIA CORPORATION. All rights reserved.
#

from __future__ import annotations

from enum import Enum
from typing import Union

from objcat.errors import InvalidBckProvider

ALIAS_S3 = "s3"
ALIAS_GS = "gs"
ALIAS_AZ = "az"


class Provider(Enum):
    """
    Represent the remote storage providers a target URL may name, e.g. `s3://bucket/key`.
    Values follow the AIStore provider names so they can be passed to an AIS gateway as-is.
    """

    AIS = "ais"
    AMAZON = "aws"
    AZURE = "azure"
    GOOGLE = "gcp"

    @staticmethod
    def parse(provider: Union[Provider, str]) -> Provider:
        """
        Parse a provider Enum instance from a given value.
        Args:
            provider: A Provider or string, e.g. a URL scheme.

        Returns: The given Provider or a new one constructed from the given value.

        Raises: InvalidBckProvider if provided with a string that is not a valid Provider option.
        """
        if isinstance(provider, Provider):
            return provider
        try:
            provider = provider_aliases.get(provider.lower(), provider.lower())
            return Provider(provider)
        except ValueError as exc:
            raise InvalidBckProvider(provider) from exc

    def is_remote(self) -> bool:
        return self != Provider.AIS

    @property
    def scheme(self) -> str:
        """URL scheme users write for this provider."""
        return provider_schemes.get(self, self.value)


provider_aliases = {
    ALIAS_GS: Provider.GOOGLE.value,
    ALIAS_S3: Provider.AMAZON.value,
    ALIAS_AZ: Provider.AZURE.value,
}
provider_schemes = {Provider(value): alias for alias, value in provider_aliases.items()}

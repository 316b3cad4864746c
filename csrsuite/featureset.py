"""Optional issuer features that individual conformance cases may require"""

import enum
from typing import Iterable


class Feature(enum.Enum):
    """Named protocol behaviour which an issuer may or may not support"""

    DURATION = "Duration"
    WILDCARDS = "Wildcards"
    ECDSA = "ECDSA"
    COMMON_NAME = "CommonName"
    KEY_USAGES = "KeyUsages"
    IP_ADDRESSES = "IPAddresses"

    def __str__(self):
        return str(self.value)


class FeatureSet(frozenset):
    """Immutable set of Features, equality of members is by name"""

    def __new__(cls, features: Iterable[Feature | str] = ()):
        return super().__new__(cls, (Feature(feature) for feature in features))

    def add(self, *features: Feature | str) -> "FeatureSet":
        """Returns new FeatureSet with the features added"""
        return FeatureSet([*self, *features])

    def contains(self, feature: Feature | str) -> bool:
        """Returns True if the feature is part of this set"""
        return Feature(feature) in self

    def unsupported(self, required: Iterable[Feature | str]) -> "FeatureSet":
        """Returns those of the required features which are present in this set"""
        return FeatureSet(feature for feature in FeatureSet(required) if feature in self)

    def __str__(self):
        return ", ".join(sorted(str(feature) for feature in self))

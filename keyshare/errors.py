"""
Errors
Every failure in this package is a KeyShareError carrying an Enum reason.

Nothing here is retried. Callers get the exception, with the reason
telling them which invariant or precondition failed.
"""

from enum import Enum


class KeyShareError(Exception):
    """Base class for key share generation, validation and reconstruction failures."""

    message = "key share operation failed"

    def __init__(self, reason: Enum):
        self.reason = reason
        super().__init__(f"{self.message}: {reason.value}")


class InvalidShareReason(Enum):
    """Invariants a key share must satisfy before it is trusted."""
    NO_KEY_SHARES = "no key shares given"
    KEY_INFO_MISMATCH = "key shares do not share identical key info"
    PARTY_INDICES = "party indices are not exactly 0..n"
    PARTY_INDEX_OUT_OF_RANGE = "party index is out of range"
    ZERO_SECRET_SHARE = "secret share is zero"
    PUBLIC_SHARE_MISMATCH = "public share does not match secret share"
    NO_PUBLIC_SHARES = "key info has no public shares"
    CURVE_MISMATCH = "point does not belong to the key's curve"
    ZERO_POINT = "public key or public share is the identity point"
    CHAIN_CODE_LENGTH = "chain code has wrong length"
    SHARED_PUBLIC_KEY_MISMATCH = "shared public key does not match public shares"
    THRESHOLD_TOO_SMALL = "threshold is too small"
    THRESHOLD_TOO_LARGE = "threshold exceeds number of parties"
    PREIMAGES_LENGTH = "number of preimages does not match number of parties"
    ZERO_PREIMAGE = "preimage is zero"
    PREIMAGES_NOT_UNIQUE = "preimages are not unique"
    POLYNOMIAL_DEGREE = "public shares do not lie on a polynomial of degree t-1"


class InvalidKeyShare(KeyShareError):
    """A key share (or batch of them) violates an invariant."""

    message = "invalid key share"


class DealerFailure(Enum):
    """Why the trusted dealer could not produce a share set."""
    INVALID_PREIMAGES = "invalid share preimages given"
    DERIVE_KEY_SHARE_INDEX = "deriving key share index failed"
    ZERO_SHARE = "generated share is zero - probability of that is negligible"
    INVALID_KEY_SHARE = "generated key shares failed validation"


class TrustedDealerError(KeyShareError):
    """Trusted dealer failed to generate shares."""

    message = "trusted dealer failed to generate shares"


class ReconstructFailure(Enum):
    """Why a secret key could not be reconstructed."""
    NO_KEY_SHARES = "no key shares given"
    MIXED_KEY_GROUPS = "key shares belong to different keys"
    TOO_FEW_KEY_SHARES = "not enough key shares to reconstruct the secret"
    DUPLICATE_SHARES = "key shares are shared at the same point"


class ReconstructError(KeyShareError):
    """Secret key reconstruction failed."""

    message = "secret key reconstruction failed"

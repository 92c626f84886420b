"""
Chain Code
Shared randomness for hierarchical (HD) key derivation.

The chain code is opaque here: it is drawn once per key, stored in the
group key info, and read later by whatever derives child keys.
"""

from keyshare.curves import default_rng


CHAIN_CODE_SIZE = 32  # bytes, as in BIP-32


def generate_chain_code(rng=None) -> bytes:
    """Draw a fresh chain code from the caller's randomness source."""
    return (rng or default_rng()).randbytes(CHAIN_CODE_SIZE)

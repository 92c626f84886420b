"""
keyshare: Threshold Key Shares
Secret sharing core for threshold-ECDSA key management.

keyshare produces, validates and reconstructs key shares so that no
single party ever holds a whole signing key:
1. Trusted dealer: import or generate a key and split it among n parties,
   t-out-of-n (Shamir) or n-out-of-n (additive)
2. Key shares: the data model, and the invariants a share must pass
   before it is trusted
3. Reconstruction: recover the secret key from a quorum of shares

Usage:
    from keyshare import trusted_dealer, reconstruct_secret_key
    shares = trusted_dealer.builder(5).set_threshold(3).generate_shares()
    secret_key = reconstruct_secret_key(shares[:3])
"""

from keyshare import trusted_dealer
from keyshare.curves import Curve, Point, SECP256K1, SECP256R1, DEFAULT_CURVE, CURVES
from keyshare.chain_code import CHAIN_CODE_SIZE, generate_chain_code
from keyshare.errors import (
    KeyShareError,
    InvalidKeyShare,
    InvalidShareReason,
    TrustedDealerError,
    DealerFailure,
    ReconstructError,
    ReconstructFailure,
)
from keyshare.key_share import (
    VssSetup,
    KeyInfo,
    DirtyCoreKeyShare,
    CoreKeyShare,
    validate_key_info,
    validate_batch,
)
from keyshare.reconstruct import reconstruct_secret_key
from keyshare.trusted_dealer import TrustedDealerBuilder

__version__ = "0.1.0"
__all__ = [
    "trusted_dealer",
    "TrustedDealerBuilder",
    "Curve",
    "Point",
    "SECP256K1",
    "SECP256R1",
    "DEFAULT_CURVE",
    "CURVES",
    "CHAIN_CODE_SIZE",
    "generate_chain_code",
    "KeyShareError",
    "InvalidKeyShare",
    "InvalidShareReason",
    "TrustedDealerError",
    "DealerFailure",
    "ReconstructError",
    "ReconstructFailure",
    "VssSetup",
    "KeyInfo",
    "DirtyCoreKeyShare",
    "CoreKeyShare",
    "validate_key_info",
    "validate_batch",
    "reconstruct_secret_key",
]

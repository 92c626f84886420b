"""
Secret Key Reconstruction
Recover the shared secret key from a quorum of validated key shares.

Additive keys need every share; the secret is their sum. Threshold keys
need at least t shares at distinct preimages; the secret is recovered by
Lagrange interpolation at zero. Any superset of a quorum gives the same
secret.

Inputs are not re-validated. Shares that were altered after validation
produce a wrong secret without any error.
"""

from keyshare.errors import ReconstructError, ReconstructFailure
from keyshare.key_share import CoreKeyShare
from keyshare.shamir import interpolate_scalars


def reconstruct_secret_key(key_shares: list[CoreKeyShare]) -> int:
    """
    Reconstruct the secret key shared by ``key_shares``.

    Args:
        key_shares: At least t validated shares of one key (all n for
            additive keys).

    Returns:
        The secret key as a scalar.

    Raises:
        TypeError: If any element is not a validated CoreKeyShare.
        ReconstructError: If the shares are empty, from different keys,
            too few, or shared at the same point.
    """
    key_shares = list(key_shares)
    for share in key_shares:
        if not isinstance(share, CoreKeyShare):
            raise TypeError(f"Expected a validated CoreKeyShare, got {type(share).__name__}")

    if not key_shares:
        raise ReconstructError(ReconstructFailure.NO_KEY_SHARES)

    key_info = key_shares[0].key_info
    if any(share.key_info != key_info for share in key_shares[1:]):
        raise ReconstructError(ReconstructFailure.MIXED_KEY_GROUPS)

    curve = key_info.curve
    vss = key_info.vss_setup

    if vss is None:
        if len({share.party_index for share in key_shares}) != len(key_shares):
            raise ReconstructError(ReconstructFailure.DUPLICATE_SHARES)
        if len(key_shares) < key_info.n:
            raise ReconstructError(ReconstructFailure.TOO_FEW_KEY_SHARES)
        return curve.scalar(sum(share.secret_share for share in key_shares))

    preimages = [curve.scalar(vss.preimages[share.party_index]) for share in key_shares]
    if len(set(preimages)) != len(preimages):
        raise ReconstructError(ReconstructFailure.DUPLICATE_SHARES)
    if len(key_shares) < vss.min_signers:
        raise ReconstructError(ReconstructFailure.TOO_FEW_KEY_SHARES)

    values = [share.secret_share for share in key_shares]
    return interpolate_scalars(0, preimages, values, curve.order)

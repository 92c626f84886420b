"""
Key Shares
The key share data model and the invariants a share must satisfy to be trusted.

A key share is assembled as a DirtyCoreKeyShare. Only validation turns it
into a CoreKeyShare, and only CoreKeyShares are accepted by
reconstruction. Both are immutable.

Group key info (shared public key, public shares, VSS setup, chain code)
is identical across all n shares of one key and carries no secrets.
"""

from dataclasses import dataclass, field

from keyshare.chain_code import CHAIN_CODE_SIZE
from keyshare.curves import Curve, Point
from keyshare.errors import InvalidKeyShare, InvalidShareReason
from keyshare.shamir import interpolate_points


@dataclass(frozen=True)
class VssSetup:
    """Public parameters of a t-out-of-n (Shamir) key."""
    min_signers: int               # t
    preimages: tuple[int, ...]     # evaluation point of each party, in party order

    def __post_init__(self):
        object.__setattr__(self, "preimages", tuple(self.preimages))


@dataclass(frozen=True)
class KeyInfo:
    """
    Public information shared by every party holding a share of one key.

    ``vss_setup`` is None for additive (n-out-of-n) keys. ``chain_code``
    is None unless the key supports HD derivation.
    """
    curve: Curve
    shared_public_key: Point
    public_shares: tuple[Point, ...]
    vss_setup: VssSetup | None = None
    chain_code: bytes | None = field(default=None, repr=False)

    def __post_init__(self):
        object.__setattr__(self, "public_shares", tuple(self.public_shares))

    @property
    def n(self) -> int:
        """Number of parties."""
        return len(self.public_shares)

    @property
    def min_signers(self) -> int:
        """Shares needed to reconstruct: t, or n for additive keys."""
        if self.vss_setup is None:
            return self.n
        return self.vss_setup.min_signers

    @property
    def is_hd_wallet(self) -> bool:
        return self.chain_code is not None

    def share_preimage(self, j: int) -> int:
        """Evaluation point of party j (j + 1 for additive keys)."""
        if self.vss_setup is None:
            return j + 1
        return self.vss_setup.preimages[j]


def validate_key_info(info: KeyInfo) -> None:
    """
    Check the group-wide invariants of a key.

    Raises:
        InvalidKeyShare: With the first violated invariant as ``reason``.
    """
    if info.n == 0:
        raise InvalidKeyShare(InvalidShareReason.NO_PUBLIC_SHARES)

    for point in (info.shared_public_key, *info.public_shares):
        if point.curve != info.curve:
            raise InvalidKeyShare(InvalidShareReason.CURVE_MISMATCH)
        if point.is_identity:
            raise InvalidKeyShare(InvalidShareReason.ZERO_POINT)

    if info.chain_code is not None and len(info.chain_code) != CHAIN_CODE_SIZE:
        raise InvalidKeyShare(InvalidShareReason.CHAIN_CODE_LENGTH)

    if info.vss_setup is None:
        _validate_additive_key_info(info)
    else:
        _validate_vss_key_info(info, info.vss_setup)


def _validate_additive_key_info(info: KeyInfo) -> None:
    total = info.curve.identity
    for public_share in info.public_shares:
        total = total + public_share
    if total != info.shared_public_key:
        raise InvalidKeyShare(InvalidShareReason.SHARED_PUBLIC_KEY_MISMATCH)


def _validate_vss_key_info(info: KeyInfo, vss: VssSetup) -> None:
    curve = info.curve
    t = vss.min_signers
    if t < 1:
        raise InvalidKeyShare(InvalidShareReason.THRESHOLD_TOO_SMALL)
    if t > info.n:
        raise InvalidKeyShare(InvalidShareReason.THRESHOLD_TOO_LARGE)
    if len(vss.preimages) != info.n:
        raise InvalidKeyShare(InvalidShareReason.PREIMAGES_LENGTH)

    preimages = [curve.scalar(preimage) for preimage in vss.preimages]
    if 0 in preimages:
        raise InvalidKeyShare(InvalidShareReason.ZERO_PREIMAGE)
    if len(set(preimages)) != len(preimages):
        raise InvalidKeyShare(InvalidShareReason.PREIMAGES_NOT_UNIQUE)

    # The first t public shares fix a degree t-1 polynomial in the exponent.
    # The shared key is its value at zero and all other shares lie on it.
    points = preimages[:t]
    values = list(info.public_shares[:t])
    if interpolate_points(0, points, values, curve) != info.shared_public_key:
        raise InvalidKeyShare(InvalidShareReason.SHARED_PUBLIC_KEY_MISMATCH)
    for preimage, public_share in zip(preimages[t:], info.public_shares[t:]):
        if interpolate_points(preimage, points, values, curve) != public_share:
            raise InvalidKeyShare(InvalidShareReason.POLYNOMIAL_DEGREE)


def _validate_party(party_index: int, secret_share: int, info: KeyInfo) -> None:
    if not 0 <= party_index < info.n:
        raise InvalidKeyShare(InvalidShareReason.PARTY_INDEX_OUT_OF_RANGE)
    if info.curve.scalar(secret_share) == 0:
        raise InvalidKeyShare(InvalidShareReason.ZERO_SECRET_SHARE)
    if info.curve.base_mul(secret_share) != info.public_shares[party_index]:
        raise InvalidKeyShare(InvalidShareReason.PUBLIC_SHARE_MISMATCH)


@dataclass(frozen=True)
class DirtyCoreKeyShare:
    """A key share as assembled, before any invariant has been checked."""
    party_index: int
    key_info: KeyInfo
    secret_share: int = field(repr=False)

    def validate(self) -> "CoreKeyShare":
        """
        Check this share and its key info.

        Returns:
            The trusted CoreKeyShare.

        Raises:
            InvalidKeyShare: If any invariant is violated.
        """
        validate_key_info(self.key_info)
        _validate_party(self.party_index, self.secret_share, self.key_info)
        return CoreKeyShare._trusted(self)


_VALIDATED = object()


@dataclass(frozen=True)
class CoreKeyShare:
    """
    A validated key share of party ``party_index``.

    Obtained from DirtyCoreKeyShare.validate() or validate_batch();
    constructing one directly raises TypeError.
    """
    party_index: int
    key_info: KeyInfo
    secret_share: int = field(repr=False)
    _token: object = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        if self._token is not _VALIDATED:
            raise TypeError(
                "CoreKeyShare is only produced by validation; "
                "build a DirtyCoreKeyShare and call validate()"
            )

    @classmethod
    def _trusted(cls, dirty: DirtyCoreKeyShare) -> "CoreKeyShare":
        return cls(dirty.party_index, dirty.key_info, dirty.secret_share, _VALIDATED)

    def to_dirty(self) -> DirtyCoreKeyShare:
        """The raw parts of this share, e.g. to rebuild it after storage."""
        return DirtyCoreKeyShare(self.party_index, self.key_info, self.secret_share)

    @property
    def curve(self) -> Curve:
        return self.key_info.curve

    @property
    def shared_public_key(self) -> Point:
        return self.key_info.shared_public_key

    @property
    def public_shares(self) -> tuple[Point, ...]:
        return self.key_info.public_shares

    @property
    def public_share(self) -> Point:
        """This party's own public share."""
        return self.key_info.public_shares[self.party_index]

    @property
    def vss_setup(self) -> VssSetup | None:
        return self.key_info.vss_setup

    @property
    def chain_code(self) -> bytes | None:
        return self.key_info.chain_code

    @property
    def n(self) -> int:
        return self.key_info.n

    @property
    def min_signers(self) -> int:
        return self.key_info.min_signers

    @property
    def preimage(self) -> int:
        """This party's evaluation point."""
        return self.key_info.share_preimage(self.party_index)

    def share_preimage(self, j: int) -> int:
        return self.key_info.share_preimage(j)


def validate_batch(shares: list[DirtyCoreKeyShare]) -> list[CoreKeyShare]:
    """
    Validate a full set of n freshly assembled shares of one key.

    All shares must carry identical key info and party indices exactly
    0..n. Key info is checked once. Either every share is returned in
    trusted form, or InvalidKeyShare is raised and nothing is.
    """
    if not shares:
        raise InvalidKeyShare(InvalidShareReason.NO_KEY_SHARES)

    key_info = shares[0].key_info
    if any(share.key_info != key_info for share in shares[1:]):
        raise InvalidKeyShare(InvalidShareReason.KEY_INFO_MISMATCH)
    if sorted(share.party_index for share in shares) != list(range(key_info.n)):
        raise InvalidKeyShare(InvalidShareReason.PARTY_INDICES)

    validate_key_info(key_info)
    for share in shares:
        _validate_party(share.party_index, share.secret_share, key_info)

    return [CoreKeyShare._trusted(share) for share in shares]

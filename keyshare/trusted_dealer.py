"""
Trusted Dealer
Generate a full set of key shares in one place.

A trusted dealer is a single point of failure and of trust: it sees the
whole secret key. It is meant for tests, and for importing an existing
key into threshold custody.

Usage:
    from keyshare import trusted_dealer
    shares = (
        trusted_dealer.builder(5)
        .set_threshold(3)
        .set_shared_secret_key(secret_key)
        .generate_shares()
    )

Generation is all-or-nothing: either all n validated shares are
returned or a TrustedDealerError is raised.
"""

import logging
from dataclasses import dataclass, field, replace

from keyshare.chain_code import generate_chain_code
from keyshare.curves import DEFAULT_CURVE, Curve, default_rng
from keyshare.errors import DealerFailure, InvalidKeyShare, TrustedDealerError
from keyshare.key_share import CoreKeyShare, DirtyCoreKeyShare, KeyInfo, VssSetup, validate_batch
from keyshare.shamir import share_additive, share_threshold


logger = logging.getLogger(__name__)


def builder(n: int, curve: Curve = DEFAULT_CURVE) -> "TrustedDealerBuilder":
    """Start configuring a trusted dealer that produces ``n`` key shares."""
    return TrustedDealerBuilder(n=n, curve=curve)


@dataclass(frozen=True)
class TrustedDealerBuilder:
    """
    Immutable trusted dealer configuration.

    Each ``set_*`` method returns a new builder. Nothing is generated
    until one of the ``generate_*`` methods is called.

    Args:
        n: Number of key shares to generate.
        curve: Group the key lives in.
        threshold: t for a t-out-of-n key, or None for an additive
            n-out-of-n key.
        shared_secret_key: Secret key to import. Random if None.
        enable_hd: Whether to attach a chain code for HD derivation.
    """
    n: int
    curve: Curve = DEFAULT_CURVE
    threshold: int | None = None
    shared_secret_key: int | None = field(default=None, repr=False)
    enable_hd: bool = True

    def __post_init__(self):
        if self.n < 1:
            raise ValueError("Number of key shares must be at least 1")

    def set_threshold(self, t: int | None) -> "TrustedDealerBuilder":
        """
        Set the threshold.

        With ``t`` set, shares form a t-out-of-n Shamir sharing. With None,
        they are additive n-out-of-n shares. Note ``t=n`` is not the same
        as None: both need every share, but only the former carries a
        VSS setup.
        """
        return replace(self, threshold=t)

    def set_shared_secret_key(self, sk: int) -> "TrustedDealerBuilder":
        """Import ``sk`` instead of generating a random secret key."""
        sk = self.curve.scalar(sk)
        if sk == 0:
            raise ValueError("Secret key must be non-zero")
        return replace(self, shared_secret_key=sk)

    def hd_wallet(self, enabled: bool) -> "TrustedDealerBuilder":
        """Whether the key supports HD derivation (on by default)."""
        return replace(self, enable_hd=enabled)

    def generate_shares(self, rng=None) -> list[CoreKeyShare]:
        """Generate key shares, Shamir-shared at points 1 to n."""
        preimages = []
        for i in range(1, self.n + 1):
            preimage = self.curve.scalar(i)
            if preimage == 0:
                raise TrustedDealerError(DealerFailure.DERIVE_KEY_SHARE_INDEX)
            preimages.append(preimage)
        return self.generate_shares_at(preimages, rng)

    def generate_shares_at_random(self, rng=None) -> list[CoreKeyShare]:
        """
        Generate key shares, Shamir-shared at random non-zero points.

        Collisions between the random points are negligible and are not
        filtered here; validation rejects them. For additive keys this
        is the same as generate_shares().
        """
        rng = rng or default_rng()
        preimages = [self.curve.random_nonzero_scalar(rng) for _ in range(self.n)]
        return self.generate_shares_at(preimages, rng)

    def generate_shares_at(self, preimages: list[int], rng=None) -> list[CoreKeyShare]:
        """
        Generate key shares, Shamir-shared at the given preimages.

        Party i's share is the polynomial's value at ``preimages[i]``.
        Preimages are ignored for additive keys, but there must still be
        exactly n of them.

        Raises:
            TrustedDealerError: If the preimages are the wrong length, a
                generated share is zero, or the result fails validation.
        """
        if len(preimages) != self.n:
            raise TrustedDealerError(DealerFailure.INVALID_PREIMAGES)
        rng = rng or default_rng()
        curve = self.curve

        shared_secret_key = self.shared_secret_key
        if shared_secret_key is None:
            shared_secret_key = curve.random_nonzero_scalar(rng)
        shared_public_key = curve.base_mul(shared_secret_key)

        if self.threshold is not None:
            secret_shares = share_threshold(curve, shared_secret_key, self.threshold, preimages, rng)
            vss_setup = VssSetup(min_signers=self.threshold, preimages=tuple(preimages))
        else:
            secret_shares = share_additive(curve, shared_secret_key, self.n, rng)
            vss_setup = None

        # Never resampled: a zero share fails the whole generation
        if any(x == 0 for x in secret_shares):
            raise TrustedDealerError(DealerFailure.ZERO_SHARE)

        public_shares = tuple(curve.base_mul(x) for x in secret_shares)
        chain_code = generate_chain_code(rng) if self.enable_hd else None

        key_info = KeyInfo(
            curve=curve,
            shared_public_key=shared_public_key,
            public_shares=public_shares,
            vss_setup=vss_setup,
            chain_code=chain_code,
        )
        dirty_shares = [
            DirtyCoreKeyShare(party_index=i, key_info=key_info, secret_share=x)
            for i, x in enumerate(secret_shares)
        ]

        try:
            key_shares = validate_batch(dirty_shares)
        except InvalidKeyShare as e:
            raise TrustedDealerError(DealerFailure.INVALID_KEY_SHARE) from e

        logger.debug(
            "Trusted dealer generated key shares",
            extra={
                "event": "trusted_dealer.shares_generated",
                "curve": curve.name,
                "n": self.n,
                "threshold": self.threshold,
                "hd_wallet": self.enable_hd,
            },
        )
        return key_shares

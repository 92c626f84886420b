"""
Tests for the trusted dealer.
"""

import logging
import random
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from keyshare import trusted_dealer
from keyshare.curves import SECP256K1, SECP256R1
from keyshare.errors import DealerFailure, InvalidKeyShare, InvalidShareReason, TrustedDealerError
from keyshare.key_share import CoreKeyShare
from keyshare.reconstruct import reconstruct_secret_key


class ConstantRandom(random.Random):
    """RNG whose every scalar draw is the same value."""

    def __init__(self, value):
        super().__init__(0)
        self.value = value

    def randrange(self, *args, **kwargs):
        return self.value


def _policies(builder, rng):
    """Yield (name, shares) for each evaluation point policy."""
    yield "sequential", builder.generate_shares(rng)
    yield "random", builder.generate_shares_at_random(rng)
    explicit = [rng.randrange(1, builder.curve.order) for _ in range(builder.n)]
    yield "explicit", builder.generate_shares_at(explicit, rng)


def test_import_key_into_3_of_5():
    """Import sk into 3-of-5 and reconstruct from {1,3,5} and {2,3,4,5}."""
    rng = random.Random(2024)
    sk = SECP256K1.random_nonzero_scalar(rng)
    shares = trusted_dealer.builder(5).set_threshold(3).set_shared_secret_key(sk).generate_shares(rng)

    assert len(shares) == 5
    assert all(isinstance(share, CoreKeyShare) for share in shares)
    assert [share.party_index for share in shares] == [0, 1, 2, 3, 4]
    assert shares[0].vss_setup.preimages == (1, 2, 3, 4, 5)
    assert shares[0].vss_setup.min_signers == 3
    assert shares[0].shared_public_key == SECP256K1.generator * sk

    assert reconstruct_secret_key([shares[0], shares[2], shares[4]]) == sk
    assert reconstruct_secret_key([shares[1], shares[2], shares[3], shares[4]]) == sk


def test_additive_3_of_3():
    """Additive shares of a random secret sum to it; public shares sum to the key."""
    shares = trusted_dealer.builder(3).generate_shares(random.Random(3))
    info = shares[0].key_info

    assert info.vss_setup is None
    secret = sum(share.secret_share for share in shares) % SECP256K1.order
    assert SECP256K1.generator * secret == info.shared_public_key
    assert info.public_shares[0] + info.public_shares[1] + info.public_shares[2] == info.shared_public_key
    assert reconstruct_secret_key(shares) == secret


def test_all_shares_share_key_info():
    """Group info is identical across the batch."""
    shares = trusted_dealer.builder(4).set_threshold(2).generate_shares(random.Random(4))
    assert all(share.key_info == shares[0].key_info for share in shares)


@pytest.mark.parametrize("threshold", [None, 2, 4])
def test_commitment_consistency_for_all_policies(threshold):
    """G * secret_share == public_shares[party_index] for every point policy."""
    rng = random.Random(5)
    builder = trusted_dealer.builder(4).set_threshold(threshold)
    for name, shares in _policies(builder, rng):
        for share in shares:
            assert SECP256K1.generator * share.secret_share == share.public_shares[share.party_index], name


def test_explicit_preimages_are_recorded():
    """Each party's share is the polynomial's value at the given preimage."""
    preimages = [101, 7, 55]
    shares = trusted_dealer.builder(3).set_threshold(2).generate_shares_at(preimages, random.Random(6))
    assert [share.preimage for share in shares] == preimages


def test_explicit_preimages_ignored_for_additive_key():
    """Additive keys carry no VSS setup whatever points were given."""
    shares = trusted_dealer.builder(3).generate_shares_at([9, 8, 7], random.Random(7))
    assert shares[0].vss_setup is None
    assert [share.preimage for share in shares] == [1, 2, 3]


def test_wrong_preimage_count_is_atomic():
    """A wrong-length point list fails before any randomness is drawn, with no shares."""
    rng = random.Random(8)
    state = rng.getstate()
    builder = trusted_dealer.builder(5).set_threshold(3)

    for preimages in ([1, 2, 3, 4], [1, 2, 3, 4, 5, 6], []):
        result = None
        with pytest.raises(TrustedDealerError) as excinfo:
            result = builder.generate_shares_at(preimages, rng)
        assert excinfo.value.reason is DealerFailure.INVALID_PREIMAGES
        assert result is None

    assert rng.getstate() == state


def test_hd_consistency():
    """HD on: one shared 32-byte chain code. HD off: no chain code at all."""
    rng = random.Random(9)
    shares = trusted_dealer.builder(4).set_threshold(3).hd_wallet(True).generate_shares(rng)
    chain_codes = {share.chain_code for share in shares}
    assert len(chain_codes) == 1
    assert len(chain_codes.pop()) == 32
    assert all(share.key_info.is_hd_wallet for share in shares)

    shares = trusted_dealer.builder(4).set_threshold(3).hd_wallet(False).generate_shares(rng)
    assert all(share.chain_code is None for share in shares)


def test_hd_enabled_by_default():
    """Dealer keys support HD derivation unless told otherwise."""
    shares = trusted_dealer.builder(2).generate_shares(random.Random(10))
    assert shares[0].chain_code is not None


def test_duplicate_preimages_rejected_by_validation():
    """Colliding points are caught before any share is trusted."""
    with pytest.raises(TrustedDealerError) as excinfo:
        trusted_dealer.builder(3).set_threshold(2).generate_shares_at([1, 1, 2], random.Random(11))
    assert excinfo.value.reason is DealerFailure.INVALID_KEY_SHARE
    assert isinstance(excinfo.value.__cause__, InvalidKeyShare)
    assert excinfo.value.__cause__.reason is InvalidShareReason.PREIMAGES_NOT_UNIQUE


def test_colliding_random_preimages_rejected():
    """Random points are not pre-filtered; a collision still fails generation."""
    with pytest.raises(TrustedDealerError) as excinfo:
        trusted_dealer.builder(3).set_threshold(2).generate_shares_at_random(ConstantRandom(5))
    assert excinfo.value.__cause__.reason is InvalidShareReason.PREIMAGES_NOT_UNIQUE


def test_threshold_larger_than_n_rejected():
    """t > n produces no shares."""
    with pytest.raises(TrustedDealerError) as excinfo:
        trusted_dealer.builder(3).set_threshold(4).generate_shares(random.Random(12))
    assert excinfo.value.__cause__.reason is InvalidShareReason.THRESHOLD_TOO_LARGE


def test_zero_additive_share_fails_without_resampling():
    """If the last additive share comes out zero, generation fails."""
    builder = trusted_dealer.builder(2).set_shared_secret_key(7).hd_wallet(False)
    with pytest.raises(TrustedDealerError) as excinfo:
        builder.generate_shares(ConstantRandom(7))
    assert excinfo.value.reason is DealerFailure.ZERO_SHARE


def test_zero_threshold_share_fails_without_resampling():
    """A polynomial value of zero at some preimage fails generation."""
    # f(x) = 7 + 7x vanishes at x = -1
    builder = trusted_dealer.builder(2).set_threshold(2).set_shared_secret_key(7)
    with pytest.raises(TrustedDealerError) as excinfo:
        builder.generate_shares_at([1, SECP256K1.order - 1], ConstantRandom(7))
    assert excinfo.value.reason is DealerFailure.ZERO_SHARE


def test_t_equal_n_is_not_additive():
    """t = n keeps a VSS setup; t = None does not."""
    rng = random.Random(13)
    threshold_shares = trusted_dealer.builder(3).set_threshold(3).generate_shares(rng)
    additive_shares = trusted_dealer.builder(3).set_threshold(None).generate_shares(rng)
    assert threshold_shares[0].vss_setup is not None
    assert threshold_shares[0].min_signers == 3
    assert additive_shares[0].vss_setup is None
    assert additive_shares[0].min_signers == 3


def test_builder_is_immutable():
    """Configuration steps return new builders and leave the original alone."""
    base = trusted_dealer.builder(5)
    configured = base.set_threshold(3).set_shared_secret_key(42).hd_wallet(False)
    assert base.threshold is None
    assert base.shared_secret_key is None
    assert base.enable_hd is True
    assert configured.threshold == 3
    assert configured.shared_secret_key == 42
    assert configured.enable_hd is False
    assert "42" not in repr(configured)


def test_invalid_configuration():
    """Zero parties and a zero secret key are rejected up front."""
    with pytest.raises(ValueError):
        trusted_dealer.builder(0)
    with pytest.raises(ValueError):
        trusted_dealer.builder(3).set_shared_secret_key(0)
    with pytest.raises(ValueError):
        trusted_dealer.builder(3).set_shared_secret_key(SECP256K1.order)


def test_other_curve():
    """The dealer is generic over the curve."""
    rng = random.Random(14)
    sk = SECP256R1.random_nonzero_scalar(rng)
    shares = trusted_dealer.builder(4, curve=SECP256R1).set_threshold(2).set_shared_secret_key(sk).generate_shares(rng)
    assert shares[0].curve is SECP256R1
    assert shares[0].shared_public_key == SECP256R1.generator * sk
    assert reconstruct_secret_key(shares[2:]) == sk


def test_default_rng():
    """Without an rng argument the OS CSPRNG is used."""
    shares = trusted_dealer.builder(3).set_threshold(2).generate_shares()
    secret = reconstruct_secret_key(shares[:2])
    assert SECP256K1.generator * secret == shares[0].shared_public_key


def test_generation_logged_without_secrets(caplog):
    """A successful generation is logged at DEBUG with no secret material."""
    sk = 987654321
    with caplog.at_level(logging.DEBUG, logger="keyshare.trusted_dealer"):
        shares = trusted_dealer.builder(3).set_threshold(2).set_shared_secret_key(sk).generate_shares(random.Random(15))

    records = [r for r in caplog.records if getattr(r, "event", None) == "trusted_dealer.shares_generated"]
    assert len(records) == 1
    assert records[0].n == 3
    assert records[0].threshold == 2
    record = records[0]
    logged = " ".join(
        str(v) for v in (record.getMessage(), record.event, record.curve, record.n, record.threshold, record.hd_wallet)
    )
    assert str(sk) not in logged
    assert all(str(share.secret_share) not in logged for share in shares)


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))

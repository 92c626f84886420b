"""
keyshare — Basic Usage Example

Imports an existing secret key into 3-of-5 threshold custody with a
trusted dealer, then shows that any 3 shares recover it and 2 do not.
"""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from keyshare import SECP256K1, ReconstructError, reconstruct_secret_key, trusted_dealer


def main():
    print("=" * 50)
    print("  keyshare — Trusted Dealer, 3-of-5")
    print("=" * 50)

    # The key to be imported — in practice an existing wallet key
    secret_key = SECP256K1.random_nonzero_scalar()
    public_key = SECP256K1.generator * secret_key

    shares = (
        trusted_dealer.builder(5)
        .set_threshold(3)
        .set_shared_secret_key(secret_key)
        .generate_shares()
    )

    print(f"\nGenerated {len(shares)} key shares")
    print(f"Shared public key: {shares[0].shared_public_key.to_bytes().hex()}")
    print(f"Matches imported key: {shares[0].shared_public_key == public_key}")
    print(f"Chain code (HD): {shares[0].chain_code.hex()}")

    for share in shares:
        print(f"  party {share.party_index}: preimage {share.preimage}, "
              f"public share {share.public_share.to_bytes().hex()[:16]}...")

    # Any 3 shares recover the key
    recovered = reconstruct_secret_key([shares[0], shares[2], shares[4]])
    print(f"\nRecovered from parties 0, 2, 4: {recovered == secret_key}")
    recovered = reconstruct_secret_key(shares[1:])
    print(f"Recovered from parties 1-4:     {recovered == secret_key}")

    # Two shares are not enough
    print("\nAttempting reconstruction with 2 shares...")
    try:
        reconstruct_secret_key(shares[:2])
        print("  ERROR: Should have failed!")
    except ReconstructError as e:
        print(f"  Correctly rejected — {e}")


if __name__ == "__main__":
    main()

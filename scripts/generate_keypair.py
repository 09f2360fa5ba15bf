#!/usr/bin/env python3
"""
Network Control Keypair Generator

Creates a new Ed25519 keypair for signing authority-change messages and
prints both halves as hex. The private key is a raw 32-byte seed.

SECURITY WARNING: the private key grants signing authority for the
identity it is registered to. Never commit it to version control.
"""

import argparse
import sys

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from networkcontrol.governance.signatures import public_key_bytes


def generate_keypair() -> tuple:
    """Return (private_key_hex, public_key_hex)"""
    private_key = Ed25519PrivateKey.generate()
    private_raw = private_key.private_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PrivateFormat.Raw,
        encryption_algorithm=serialization.NoEncryption()
    )
    return private_raw.hex(), public_key_bytes(private_key).hex()


def main() -> int:
    parser = argparse.ArgumentParser(description="Generate an Ed25519 signing keypair")
    parser.add_argument("--public-only", action="store_true",
                        help="Print only the public key (private key goes to stderr)")
    args = parser.parse_args()

    private_hex, public_hex = generate_keypair()
    if args.public_only:
        print(f"private_key: {private_hex}", file=sys.stderr)
    else:
        print(f"private_key: {private_hex}")
    print(f"public_key:  {public_hex}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

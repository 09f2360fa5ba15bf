#!/usr/bin/env python3
"""
Network Control Offline Signer

Signs the canonical payload of a governance message with an Ed25519
private key and prints the public key and signature to paste into the
sign step.

Usage:
    python scripts/sign_message.py --message <hex> --private-key <hex>
    python scripts/sign_message.py --message <hex> --key-file keys/fed1.key
"""

import argparse
import sys
from pathlib import Path

from networkcontrol.errors import NetworkControlError
from networkcontrol.governance import decode_hex, signable_payload, sign_message
from networkcontrol.governance.signatures import load_private_key


def main() -> int:
    parser = argparse.ArgumentParser(description="Sign a governance message payload")
    parser.add_argument("--message", required=True, help="Hex-encoded governance message")
    key_group = parser.add_mutually_exclusive_group(required=True)
    key_group.add_argument("--private-key", help="Raw 32-byte Ed25519 seed as hex")
    key_group.add_argument("--key-file", help="File holding the hex seed")
    args = parser.parse_args()

    private_hex = args.private_key
    if args.key_file:
        private_hex = Path(args.key_file).read_text(encoding="utf-8").strip()

    try:
        message = decode_hex(args.message)
    except NetworkControlError as e:
        print(f"ERROR: {e.message}", file=sys.stderr)
        return 2

    try:
        private_key = load_private_key(private_hex)
    except ValueError as e:
        print(f"ERROR: invalid private key: {e}", file=sys.stderr)
        return 2

    signature = sign_message(message, private_key)
    print(f"payload:    {signable_payload(message).hex()}")
    print(f"public_key: {signature.public_key.hex()}")
    print(f"signature:  {signature.signature.hex()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

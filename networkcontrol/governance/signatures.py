# networkcontrol/governance/signatures.py
"""
Signature Collector - Ed25519 co-signing of governance messages

The signable payload of a message is its 42-byte body: every field except
the signature set, in wire order. Signers, the collector, the evaluator and
the submitter all derive it through signable_payload(); there is no other
definition.
"""

import logging
from typing import List, Tuple, Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

from networkcontrol.errors import SignatureError
from .codec import encode_body
from .messages import PUBLIC_KEY_SIZE, SIGNATURE_SIZE, GovernanceMessage, Signature

logger = logging.getLogger("networkcontrol.governance.signatures")


def signable_payload(message: GovernanceMessage) -> bytes:
    """The exact bytes a co-signer signs"""
    return encode_body(message)


def verify_signature(payload: bytes, public_key: bytes, signature: bytes) -> bool:
    """
    Verify an Ed25519 signature.

    Returns False for malformed keys or signatures as well as for a
    signature that does not match the payload.
    """
    if len(public_key) != PUBLIC_KEY_SIZE or len(signature) != SIGNATURE_SIZE:
        return False
    try:
        Ed25519PublicKey.from_public_bytes(public_key).verify(signature, payload)
        return True
    except (InvalidSignature, ValueError):
        return False


def add_signature(
    message: GovernanceMessage,
    public_key: bytes,
    signature: bytes
) -> GovernanceMessage:
    """
    Verify a signature over the message's signable payload and append it.

    Returns a new message; the input message is never modified.

    Raises:
        SignatureError: the signature does not verify under public_key
    """
    if len(public_key) != PUBLIC_KEY_SIZE:
        raise SignatureError(
            f"Public key must be {PUBLIC_KEY_SIZE} bytes, got {len(public_key)}",
            context={"length": len(public_key)}
        )
    if len(signature) != SIGNATURE_SIZE:
        raise SignatureError(
            f"Signature must be {SIGNATURE_SIZE} bytes, got {len(signature)}",
            context={"length": len(signature)}
        )

    if not verify_signature(signable_payload(message), public_key, signature):
        logger.warning(f"Rejected signature from key {public_key.hex()}")
        raise SignatureError(
            "signature is invalid",
            context={"public_key": public_key.hex()}
        )

    logger.info(
        f"Signature from key {public_key.hex()} accepted for "
        f"{message.kind.label} {message.target_chain_id_hex}"
    )
    return message.with_signature(Signature(public_key=public_key, signature=signature))


def check_signatures(message: GovernanceMessage) -> List[Tuple[Signature, bool]]:
    """Pair every attached signature with whether it verifies"""
    payload = signable_payload(message)
    return [
        (sig, verify_signature(payload, sig.public_key, sig.signature))
        for sig in message.signatures
    ]


# =============================================================================
# Signing (operator tooling and tests)
# =============================================================================

def load_private_key(private_key: Union[bytes, str]) -> Ed25519PrivateKey:
    """Load a raw 32-byte Ed25519 seed, given as bytes or hex"""
    raw = bytes.fromhex(private_key) if isinstance(private_key, str) else private_key
    return Ed25519PrivateKey.from_private_bytes(raw)


def public_key_bytes(private_key: Ed25519PrivateKey) -> bytes:
    return private_key.public_key().public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw
    )


def sign_message(message: GovernanceMessage, private_key: Ed25519PrivateKey) -> Signature:
    """Produce a detached signature over the message's signable payload"""
    return Signature(
        public_key=public_key_bytes(private_key),
        signature=private_key.sign(signable_payload(message)),
    )

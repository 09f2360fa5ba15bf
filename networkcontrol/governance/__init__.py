# networkcontrol/governance/__init__.py
"""
Governance Message Pipeline - authority-set change requests

Flow:
- BUILD: encode an AddServer / RemoveServer request body
- SIGN: co-signers' Ed25519 signatures are verified and appended
- EVALUATE: signatures are counted against the roster (quorum = n // 2 + 1)
- SUBMIT: the signed message is broadcast to the network
"""

from .messages import (
    GovernanceMessage,
    MessageKind,
    ServerType,
    Signature,
)
from .codec import decode, decode_hex, encode, encode_body, encode_message
from .signatures import add_signature, check_signatures, signable_payload, sign_message
from .quorum import QuorumCalculator, QuorumEvaluator, QuorumVerdict, SignerCheck
from .submitter import Acknowledgement, MessageBroadcaster, Submitter

__all__ = [
    # Messages
    "GovernanceMessage",
    "MessageKind",
    "ServerType",
    "Signature",
    # Codec
    "decode",
    "decode_hex",
    "encode",
    "encode_body",
    "encode_message",
    # Signatures
    "add_signature",
    "check_signatures",
    "signable_payload",
    "sign_message",
    # Quorum
    "QuorumCalculator",
    "QuorumEvaluator",
    "QuorumVerdict",
    "SignerCheck",
    # Submission
    "Acknowledgement",
    "MessageBroadcaster",
    "Submitter",
]

# networkcontrol/governance/messages.py
"""
Governance message types - authority-set change requests

A GovernanceMessage asks the network to add a server to the authority set
(as Federated or Audit, which also covers promotion and demotion) or to
remove one. The message kind is a closed set: every consumer matches on
MessageKind explicitly and rejects anything else.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import IntEnum
from typing import Any, Dict, Tuple

CHAIN_ID_SIZE = 32
PUBLIC_KEY_SIZE = 32
SIGNATURE_SIZE = 64


def format_millis(millis: int) -> str:
    """ISO-8601 UTC rendering of an epoch-milliseconds value"""
    try:
        return datetime.fromtimestamp(millis / 1000, tz=timezone.utc).isoformat()
    except (OverflowError, OSError, ValueError):
        return f"{millis} ms since epoch"


class MessageKind(IntEnum):
    """Wire tag of an authority-change request"""
    ADD_SERVER = 0
    REMOVE_SERVER = 1

    @property
    def label(self) -> str:
        if self is MessageKind.ADD_SERVER:
            return "Add Server"
        if self is MessageKind.REMOVE_SERVER:
            return "Remove Server"
        raise ValueError(f"unhandled message kind: {self!r}")

    @classmethod
    def from_action(cls, action: str) -> "MessageKind":
        """Map the operator-facing action name ("add" / "remove") to a kind"""
        normalized = action.strip().lower()
        if normalized in ("add", "addserver", "add_server"):
            return cls.ADD_SERVER
        if normalized in ("remove", "removeserver", "remove_server"):
            return cls.REMOVE_SERVER
        raise ValueError(f"unknown message action: {action}")


class ServerType(IntEnum):
    """Requested status of the target server"""
    FEDERATED = 0
    AUDIT = 1

    @property
    def label(self) -> str:
        return "Federated" if self is ServerType.FEDERATED else "Audit"

    @classmethod
    def from_name(cls, name: str) -> "ServerType":
        normalized = name.strip().lower()
        if normalized in ("federated", "fed", "0"):
            return cls.FEDERATED
        if normalized in ("audit", "1"):
            return cls.AUDIT
        raise ValueError(f"unknown server type: {name}")


@dataclass(frozen=True)
class Signature:
    """An Ed25519 public key and its signature over a message's signable payload"""
    public_key: bytes
    signature: bytes

    @property
    def public_key_hex(self) -> str:
        return self.public_key.hex()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "public_key": self.public_key.hex(),
            "signature": self.signature.hex(),
        }


@dataclass(frozen=True)
class GovernanceMessage:
    """
    An authority-change request and the signatures collected so far.

    Messages are values: adding a signature returns a new message with the
    signature appended, leaving the original untouched.
    """
    kind: MessageKind
    timestamp: int                 # milliseconds since epoch
    target_chain_id: bytes         # 32 raw bytes
    server_type: ServerType
    signatures: Tuple[Signature, ...] = field(default_factory=tuple)

    @property
    def target_chain_id_hex(self) -> str:
        return self.target_chain_id.hex()

    @property
    def timestamp_iso(self) -> str:
        return format_millis(self.timestamp)

    def with_signature(self, signature: Signature) -> "GovernanceMessage":
        return replace(self, signatures=self.signatures + (signature,))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.label,
            "timestamp": self.timestamp,
            "time": self.timestamp_iso,
            "target_chain_id": self.target_chain_id_hex,
            "server_type": self.server_type.label,
            "signatures": [s.to_dict() for s in self.signatures],
        }

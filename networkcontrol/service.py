# networkcontrol/service.py
"""
Network Control Service - operator workflow over the governance pipeline

One instance serves any number of concurrent workflows. Messages travel
between calls as hex strings, so the service itself only holds the shared
roster cache.

Workflow:
1. draft / build_message: create the unsigned request
2. add_signature: called once per co-signer
3. evaluate: quorum verdict for operator review
4. submit: broadcast once the verdict passes
"""

import logging
import re
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Union

from networkcontrol.errors import ValidationError
from networkcontrol.roster import AuthorityRoster, AuthorityRosterCache, AuthorityStatus
from networkcontrol.roster.models import find_by_signing_key
from networkcontrol.governance import (
    Acknowledgement,
    MessageBroadcaster,
    MessageKind,
    QuorumEvaluator,
    QuorumVerdict,
    ServerType,
    Submitter,
    add_signature,
    check_signatures,
    decode_hex,
    encode,
    encode_message,
    signable_payload,
)
from networkcontrol.governance.codec import from_hex, parse_kind

logger = logging.getLogger("networkcontrol.service")

CHAIN_ID_PATTERN = re.compile(r"^[a-fA-F0-9]{64}$")


@dataclass
class MessageDraft:
    """Prefilled values for crafting a new message"""
    kind: MessageKind
    chain_id: str
    timestamp: int
    server_type: Optional[ServerType] = None
    current_status: Optional[AuthorityStatus] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "action": "add" if self.kind == MessageKind.ADD_SERVER else "remove",
            "chain_id": self.chain_id,
            "timestamp": self.timestamp,
            "server_type": self.server_type.label.lower() if self.server_type is not None else None,
            "current_status": self.current_status.value if self.current_status else None,
        }


@dataclass
class SignatureRow:
    public_key: str
    authority_chain_id: Optional[str]
    valid: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "public_key": self.public_key,
            "authority_chain_id": self.authority_chain_id,
            "valid": self.valid,
        }


@dataclass
class MessageDescription:
    """Human-readable breakdown of a message and its signatures"""
    message_hex: str
    kind: str
    timestamp: int
    time: str
    seconds_until: float
    target_chain_id: str
    server_type: str
    signable_payload: str
    signatures: List[SignatureRow] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message_hex,
            "kind": self.kind,
            "timestamp": self.timestamp,
            "time": self.time,
            "seconds_until": self.seconds_until,
            "target_chain_id": self.target_chain_id,
            "server_type": self.server_type,
            "signable_payload": self.signable_payload,
            "signatures": [s.to_dict() for s in self.signatures],
        }


class NetworkControl:
    """Entry point for the presentation layer"""

    def __init__(
        self,
        roster_cache: AuthorityRosterCache,
        broadcaster: MessageBroadcaster,
        evaluator: Optional[QuorumEvaluator] = None,
        clock: Callable[[], float] = time.time
    ):
        self.roster_cache = roster_cache
        self.submitter = Submitter(broadcaster)
        self.evaluator = evaluator or QuorumEvaluator(clock=clock)
        self._clock = clock

    def _now_millis(self) -> int:
        return int(self._clock() * 1000)

    # =========================================================================
    # Roster
    # =========================================================================

    async def authorities(self) -> AuthorityRoster:
        return await self.roster_cache.get()

    # =========================================================================
    # Building
    # =========================================================================

    async def draft(self, action: str, chain_id: str) -> MessageDraft:
        """
        Prefill a new message for the given action and target.

        chain_id is either 64 hex characters or "new" for a server that is
        not yet known. For an existing authority the suggested server type
        is the opposite of its status when adding (promote/demote) and its
        current status when removing.
        """
        kind = parse_kind(action)

        if chain_id == "new":
            chain_id = ""
        elif not CHAIN_ID_PATTERN.match(chain_id):
            raise ValidationError("chain must be 32 bytes hex", context={"chain_id": chain_id})

        draft = MessageDraft(kind=kind, chain_id=chain_id.lower(), timestamp=self._now_millis())
        if not chain_id:
            return draft

        existing = await self.roster_cache.get_specific(chain_id)
        if existing is None:
            return draft

        draft.current_status = existing.status
        current = ServerType.FEDERATED if existing.is_federated else ServerType.AUDIT
        if kind == MessageKind.ADD_SERVER:
            draft.server_type = ServerType.AUDIT if current == ServerType.FEDERATED else ServerType.FEDERATED
        elif kind == MessageKind.REMOVE_SERVER:
            draft.server_type = current
        return draft

    def build_message(
        self,
        kind: Union[MessageKind, int, str],
        target_chain_id_hex: str,
        timestamp_millis: Union[int, str],
        server_type: Union[ServerType, int, str]
    ) -> str:
        """Encode an unsigned request; raises ValidationError on bad input"""
        message_hex = encode(kind, target_chain_id_hex, timestamp_millis, server_type).hex()
        logger.info(f"Built message {message_hex}")
        return message_hex

    # =========================================================================
    # Signing
    # =========================================================================

    def add_signature(self, message_hex: str, public_key_hex: str, signature_hex: str) -> str:
        """Verify and attach one co-signature; returns the new message hex"""
        message = decode_hex(message_hex)
        public_key = from_hex(public_key_hex, "public key")
        signature = from_hex(signature_hex, "signature")

        signed = add_signature(message, public_key, signature)
        return encode_message(signed).hex()

    # =========================================================================
    # Review
    # =========================================================================

    async def describe(self, message_hex: str) -> MessageDescription:
        """Decode a message and label each signature against the roster"""
        message = decode_hex(message_hex)
        roster = await self.roster_cache.get()

        rows = []
        for sig, valid in check_signatures(message):
            authority = find_by_signing_key(roster, sig.public_key_hex)
            rows.append(SignatureRow(
                public_key=sig.public_key_hex,
                authority_chain_id=authority.chain_id if authority else None,
                valid=valid,
            ))

        return MessageDescription(
            message_hex=encode_message(message).hex(),
            kind=message.kind.label,
            timestamp=message.timestamp,
            time=message.timestamp_iso,
            seconds_until=(message.timestamp - self._now_millis()) / 1000,
            target_chain_id=message.target_chain_id_hex,
            server_type=message.server_type.label,
            signable_payload=signable_payload(message).hex(),
            signatures=rows,
        )

    async def evaluate(self, message_hex: str) -> QuorumVerdict:
        """Quorum verdict for a message against the current roster"""
        message = decode_hex(message_hex)
        roster = await self.roster_cache.get()
        return self.evaluator.evaluate(message, roster)

    # =========================================================================
    # Submission
    # =========================================================================

    async def submit(self, message_hex: str) -> Acknowledgement:
        return await self.submitter.submit(message_hex)

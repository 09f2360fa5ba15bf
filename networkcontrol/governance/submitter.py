# networkcontrol/governance/submitter.py
"""
Submitter - hands a finalized governance message to the network
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Protocol

from .codec import decode, from_hex

logger = logging.getLogger("networkcontrol.governance.submitter")


class MessageBroadcaster(Protocol):
    """External interface that relays a raw message to the network"""

    async def send_raw_message(self, message_hex: str) -> str:
        """Broadcast the hex-encoded message, raising NetworkError on failure."""


@dataclass(frozen=True)
class Acknowledgement:
    """Receipt for a broadcast message"""
    message_hex: str
    response: str
    submitted_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message_hex,
            "response": self.response,
            "submitted_at": self.submitted_at.isoformat(),
        }


class Submitter:
    """
    Re-validates a message and forwards its raw encoding.

    Quorum is not re-checked here; callers submit only after a passing verdict.
    """

    def __init__(self, broadcaster: MessageBroadcaster):
        self.broadcaster = broadcaster

    async def submit(self, raw_message_hex: str) -> Acknowledgement:
        """
        Raises:
            DecodeError: the payload is not a well-formed governance message
            NetworkError: the broadcast failed
        """
        raw = from_hex(raw_message_hex, "message")
        message = decode(raw)
        message_hex = raw.hex()

        response = await self.broadcaster.send_raw_message(message_hex)

        logger.info(
            f"Submitted {message.kind.label} for {message.target_chain_id_hex} "
            f"with {len(message.signatures)} signatures: {response}"
        )
        return Acknowledgement(
            message_hex=message_hex,
            response=response,
            submitted_at=datetime.now(timezone.utc),
        )

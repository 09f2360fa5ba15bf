# networkcontrol/governance/quorum.py
"""
Quorum Evaluator - decides whether a governance message may be submitted

Majority Formula:
- n = current authority roster size (Federated + Audit)
- quorum = floor(n / 2) + 1

For n=5 authorities:
- quorum = 5 // 2 + 1 = 3

Only the signature count gates submission. Freshness and membership
problems are collected as error notes for the operator but do not change
the outcome.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Set

from networkcontrol.config import settings
from networkcontrol.roster.models import Authority, find_authority, find_by_signing_key
from .messages import GovernanceMessage, MessageKind, ServerType, format_millis
from .signatures import check_signatures

logger = logging.getLogger("networkcontrol.governance.quorum")


@dataclass
class QuorumCalculator:
    """Simple-majority quorum over the current authority roster"""

    total_nodes: int

    def __post_init__(self):
        if self.total_nodes < 0:
            raise ValueError(f"Roster size cannot be negative, got {self.total_nodes}")
        self._quorum_size = self.total_nodes // 2 + 1

    @property
    def quorum_size(self) -> int:
        """Minimum valid signatures needed for quorum (n // 2 + 1)"""
        return self._quorum_size

    def has_quorum(self, votes: int) -> bool:
        return votes >= self._quorum_size


@dataclass(frozen=True)
class SignerCheck:
    """One attached signature as seen against the roster"""
    public_key: str
    authority_chain_id: Optional[str]
    valid: bool
    counted: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "public_key": self.public_key,
            "authority_chain_id": self.authority_chain_id,
            "valid": self.valid,
            "counted": self.counted,
        }


@dataclass
class QuorumVerdict:
    """Outcome of evaluating a message against the roster"""
    info_notes: List[str] = field(default_factory=list)
    error_notes: List[str] = field(default_factory=list)
    valid_signer_count: int = 0
    required_count: int = 0
    passed: bool = False
    signers: List[SignerCheck] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "info": list(self.info_notes),
            "errors": list(self.error_notes),
            "valid_signer_count": self.valid_signer_count,
            "required_count": self.required_count,
            "passed": self.passed,
            "signers": [s.to_dict() for s in self.signers],
        }


class QuorumEvaluator:
    """
    Classifies a governance message and checks it against the authority roster.

    The roster is passed in per call; the evaluator holds no state besides
    its freshness window and clock.
    """

    def __init__(
        self,
        window_seconds: Optional[int] = None,
        clock: Callable[[], float] = time.time
    ):
        seconds = settings.TIMESTAMP_WINDOW_SECONDS if window_seconds is None else window_seconds
        self.window_millis = int(seconds * 1000)
        self._clock = clock

    def evaluate(self, message: GovernanceMessage, roster: Sequence[Authority]) -> QuorumVerdict:
        verdict = QuorumVerdict()

        self._check_freshness(message, verdict)
        self._count_signers(message, roster, verdict)
        self._classify(message, roster, verdict)

        quorum = QuorumCalculator(total_nodes=len(roster))
        verdict.required_count = quorum.quorum_size
        verdict.passed = quorum.has_quorum(verdict.valid_signer_count)
        if not verdict.passed:
            verdict.error_notes.append(
                f"There are only {verdict.valid_signer_count} valid signatures. "
                f"Need at least {verdict.required_count} to pass"
            )

        logger.info(
            f"Evaluated {message.kind.label} for {message.target_chain_id_hex}: "
            f"{verdict.valid_signer_count}/{verdict.required_count} signatures, "
            f"passed={verdict.passed}, errors={len(verdict.error_notes)}"
        )
        return verdict

    # -------------------------------------------------------------------------
    # Checks
    # -------------------------------------------------------------------------

    def _check_freshness(self, message: GovernanceMessage, verdict: QuorumVerdict) -> None:
        now_millis = int(self._clock() * 1000)
        sent = message.timestamp
        # Inclusive window: exactly one window away is still acceptable
        if abs(now_millis - sent) > self.window_millis:
            verdict.error_notes.append(
                "The timestamp is outside the acceptable window. "
                f"Must be sent between {format_millis(sent - self.window_millis)} "
                f"and {format_millis(sent + self.window_millis)}."
            )

    def _count_signers(
        self,
        message: GovernanceMessage,
        roster: Sequence[Authority],
        verdict: QuorumVerdict
    ) -> None:
        seen: Set[str] = set()
        for sig, valid in check_signatures(message):
            key = sig.public_key_hex
            authority = find_by_signing_key(roster, key)
            chain_id = authority.chain_id if authority else None

            counted = valid and authority is not None and key not in seen
            if counted:
                seen.add(key)
                verdict.valid_signer_count += 1
            elif not valid:
                verdict.error_notes.append(f"Signature from key {key} does not verify")
            elif authority is None:
                verdict.info_notes.append(f"Signature from key {key} is not from a server in the authority set")
            else:
                verdict.info_notes.append(f"Duplicate signature from {chain_id} counted once")

            verdict.signers.append(SignerCheck(
                public_key=key,
                authority_chain_id=chain_id,
                valid=valid,
                counted=counted,
            ))

    def _classify(
        self,
        message: GovernanceMessage,
        roster: Sequence[Authority],
        verdict: QuorumVerdict
    ) -> None:
        target = find_authority(roster, message.target_chain_id_hex)
        is_federated = target is not None and target.is_federated
        to_federated = message.server_type == ServerType.FEDERATED

        if message.kind == MessageKind.ADD_SERVER:
            if target is None:
                verdict.info_notes.append(
                    "Promoting a new server into the authority set as "
                    f"{message.server_type.label} Node"
                )
            elif to_federated and is_federated:
                verdict.error_notes.append("Promoting a node that is already a fed to fed")
            elif to_federated:
                verdict.info_notes.append(
                    "Promoting an Audit node to a Fed node and increasing # of feds"
                )
            elif is_federated:
                verdict.info_notes.append(
                    "Demoting a Fed node to an Audit node and decreasing # of feds"
                )
            else:
                verdict.error_notes.append("Demoting a node that is an audit node to audit node")
        elif message.kind == MessageKind.REMOVE_SERVER:
            if target is None:
                verdict.error_notes.append(
                    "Trying to remove a server that's not in the authority set"
                )
        else:
            raise ValueError(f"unhandled message kind: {message.kind!r}")

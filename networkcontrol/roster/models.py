# networkcontrol/roster/models.py
"""
Authority roster entries and their canonical ordering.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from networkcontrol.errors import FetchError

HEX32_PATTERN = re.compile(r"[0-9a-fA-F]{64}")


class AuthorityStatus(str, Enum):
    """Status of an authority in the current set"""
    FEDERATED = "federated"    # Full voting member
    AUDIT = "audit"            # Non-voting, eligible for promotion


@dataclass(frozen=True)
class Authority:
    """Immutable snapshot of one authority as reported by the network"""
    chain_id: str
    signing_key: str
    status: AuthorityStatus

    @property
    def is_federated(self) -> bool:
        return self.status == AuthorityStatus.FEDERATED

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Authority":
        """
        Build an Authority from a roster-source record.

        Accepts both the factomd field names (chainid, signingkey) and the
        attribute names used here (chain_id, signing_key). Both values must
        be 32 bytes of hex.
        """
        if not isinstance(data, Mapping):
            raise FetchError(
                f"Authority record is not an object: {data!r}",
                context={"record": repr(data)}
            )

        chain_id = data.get("chainid", data.get("chain_id"))
        signing_key = data.get("signingkey", data.get("signing_key"))
        status = data.get("status")

        if not isinstance(chain_id, str) or not isinstance(signing_key, str):
            raise FetchError(
                "Authority record is missing chain id or signing key",
                context={"record": dict(data)}
            )
        for field_name, value in (("chain id", chain_id), ("signing key", signing_key)):
            if not HEX32_PATTERN.fullmatch(value):
                raise FetchError(
                    f"Authority {field_name} is not 32 bytes of hex: {value!r}",
                    context={"record": dict(data)}
                )
        try:
            parsed_status = AuthorityStatus(str(status).lower())
        except ValueError as e:
            raise FetchError(
                f"Authority {chain_id} has unknown status: {status}",
                original_error=e,
                context={"chain_id": chain_id, "status": status}
            )

        return cls(
            chain_id=chain_id.lower(),
            signing_key=signing_key.lower(),
            status=parsed_status,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "chain_id": self.chain_id,
            "signing_key": self.signing_key,
            "status": self.status.value,
        }


def roster_sort_key(authority: Authority) -> Tuple[int, str]:
    """Federated entries first, then ascending chain ID within each status"""
    return (0 if authority.is_federated else 1, authority.chain_id)


def sort_roster(authorities: Iterable[Authority]) -> Tuple[Authority, ...]:
    """Return the roster in canonical order"""
    return tuple(sorted(authorities, key=roster_sort_key))


def find_authority(roster: Iterable[Authority], chain_id: str) -> Optional[Authority]:
    """Linear scan for an exact chain ID match"""
    wanted = chain_id.lower()
    for authority in roster:
        if authority.chain_id == wanted:
            return authority
    return None


def find_by_signing_key(roster: Iterable[Authority], public_key_hex: str) -> Optional[Authority]:
    """Return the authority whose signing key is public_key_hex, if any"""
    wanted = public_key_hex.lower()
    for authority in roster:
        if authority.signing_key == wanted:
            return authority
    return None
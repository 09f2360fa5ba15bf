# networkcontrol/roster/__init__.py
"""
Authority Roster - the current set of block-producing nodes

Authorities are Federated (voting) or Audit (standby). The roster is
fetched from the network and cached with a short TTL.
"""

from .models import (
    Authority,
    AuthorityStatus,
    find_authority,
    find_by_signing_key,
    sort_roster,
)
from .cache import AuthorityRosterCache, AuthorityRoster, RosterSnapshot, RosterSource

__all__ = [
    # Models
    "Authority",
    "AuthorityStatus",
    "find_authority",
    "find_by_signing_key",
    "sort_roster",
    # Cache
    "AuthorityRosterCache",
    "AuthorityRoster",
    "RosterSnapshot",
    "RosterSource",
]

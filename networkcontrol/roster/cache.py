# networkcontrol/roster/cache.py
"""
Authority Roster Cache - memoized view of the current authority set

The roster is always sourced from the network; this cache only bounds how
often that happens. A roster and its fetch time are stored together as one
immutable RosterSnapshot and swapped with a single assignment, so a reader
never sees a roster paired with another roster's fetch time.

Refresh is single-flight: when the snapshot is stale, the first caller
starts a fetch task and every concurrent caller awaits that same task.
A failed fetch propagates to all of its waiters and leaves the previous
snapshot in place.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Protocol, Sequence, Tuple, Union

from networkcontrol.config import settings
from networkcontrol.errors import FetchError, NetworkError
from .models import Authority, find_authority, sort_roster

logger = logging.getLogger("networkcontrol.roster.cache")

AuthorityRoster = Tuple[Authority, ...]


class RosterSource(Protocol):
    """External authoritative source of the authority set"""

    async def fetch_authorities(self) -> Sequence[Union[Authority, Mapping[str, Any]]]:
        """Return the current authorities, raising NetworkError on failure."""


@dataclass(frozen=True)
class RosterSnapshot:
    """A fetched roster bundled with the clock reading taken when it landed"""
    roster: AuthorityRoster
    fetched_at: float


class AuthorityRosterCache:
    """
    Fetches and memoizes the authority roster with a time-based staleness policy.

    The cache belongs to one event loop; all callers must await it from that loop.
    """

    def __init__(
        self,
        source: RosterSource,
        ttl: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        self.source = source
        self.ttl = settings.ROSTER_CACHE_TTL if ttl is None else ttl
        self._clock = clock

        self._snapshot: Optional[RosterSnapshot] = None
        self._inflight: Optional[asyncio.Future] = None
        self.fetch_count = 0

    @property
    def snapshot(self) -> Optional[RosterSnapshot]:
        return self._snapshot

    def is_fresh(self) -> bool:
        snapshot = self._snapshot
        return snapshot is not None and self._clock() - snapshot.fetched_at < self.ttl

    async def get(self) -> AuthorityRoster:
        """
        Return the cached roster if fresh, otherwise refresh it.

        Raises:
            FetchError: the source failed; the previous snapshot is kept
        """
        snapshot = self._snapshot
        if snapshot is not None and self._clock() - snapshot.fetched_at < self.ttl:
            logger.debug(f"Roster cache hit: {len(snapshot.roster)} authorities")
            return snapshot.roster

        if self._inflight is None:
            self._inflight = asyncio.ensure_future(self._refresh())
        else:
            logger.debug("Roster refresh already in flight, joining it")

        # Shield so one caller's cancellation does not abort the shared fetch
        return await asyncio.shield(self._inflight)

    async def get_specific(self, chain_id: str) -> Optional[Authority]:
        """
        Look up one authority by chain ID.

        Returns None when the chain is not in the authority set; that is an
        expected answer, not a failure.
        """
        roster = await self.get()
        return find_authority(roster, chain_id)

    async def _refresh(self) -> AuthorityRoster:
        try:
            self.fetch_count += 1
            try:
                records = await self.source.fetch_authorities()
            except FetchError:
                raise
            except NetworkError as e:
                raise FetchError(
                    f"Unable to fetch authority roster: {e.message}",
                    original_error=e,
                    context=e.context
                ) from e

            if not isinstance(records, Sequence) or isinstance(records, (str, bytes)):
                raise FetchError(
                    f"Roster source returned {type(records).__name__}, expected a sequence of authorities",
                    context={"type": type(records).__name__}
                )

            authorities = [
                r if isinstance(r, Authority) else Authority.from_dict(r)
                for r in records
            ]
            roster = sort_roster(authorities)
            self._snapshot = RosterSnapshot(roster=roster, fetched_at=self._clock())

            logger.info(f"Authority roster refreshed: {len(roster)} authorities")
            return roster

        except FetchError as e:
            stale = self._snapshot is not None
            logger.warning(f"Roster fetch failed (stale roster retained: {stale}): {e.message}")
            raise
        finally:
            self._inflight = None

    def get_status(self) -> Dict[str, Any]:
        """Get cache status for health reporting"""
        snapshot = self._snapshot
        return {
            "cached": snapshot is not None,
            "fresh": self.is_fresh(),
            "authorities": len(snapshot.roster) if snapshot else 0,
            "age_seconds": round(self._clock() - snapshot.fetched_at, 3) if snapshot else None,
            "ttl_seconds": self.ttl,
            "fetch_count": self.fetch_count,
        }

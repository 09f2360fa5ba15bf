"""
pytest configuration for the Network Control test suite
"""

import asyncio
from typing import List

import pytest
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from networkcontrol.errors import NetworkError
from networkcontrol.governance.signatures import public_key_bytes
from networkcontrol.roster import Authority, AuthorityStatus

# 2021-01-01T00:00:00Z
NOW = 1609459200.0


class FakeClock:
    """Manually advanced clock, usable for both time.time and time.monotonic"""

    def __init__(self, now: float = NOW):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeRosterSource:
    """Roster source that counts calls and can be told to fail or stall"""

    def __init__(self, authorities, delay: float = 0.0):
        self.authorities = list(authorities)
        self.delay = delay
        self.calls = 0
        self.fail_with = None

    async def fetch_authorities(self):
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_with is not None:
            raise self.fail_with
        return self.authorities


class FakeBroadcaster:
    def __init__(self):
        self.sent: List[str] = []
        self.fail_with = None

    async def send_raw_message(self, message_hex: str) -> str:
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append(message_hex)
        return "Successfully sent the message"


def chain_id(n: int) -> str:
    return f"{n:064x}"


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def keys():
    """Five deterministic Ed25519 keys, one per authority"""
    return [Ed25519PrivateKey.from_private_bytes(bytes([i + 1]) * 32) for i in range(5)]


@pytest.fixture
def outsider_key():
    return Ed25519PrivateKey.from_private_bytes(bytes([0xEE]) * 32)


@pytest.fixture
def roster(keys):
    """
    Sorted five-member roster:
    chain ids 1..3 are Federated, 4..5 are Audit.
    """
    return tuple(
        Authority(
            chain_id=chain_id(i + 1),
            signing_key=public_key_bytes(key).hex(),
            status=AuthorityStatus.FEDERATED if i < 3 else AuthorityStatus.AUDIT,
        )
        for i, key in enumerate(keys)
    )


@pytest.fixture
def roster_source(roster):
    return FakeRosterSource(reversed(roster))


@pytest.fixture
def broadcaster():
    return FakeBroadcaster()


@pytest.fixture
def network_error():
    return NetworkError("connection refused", error_code="TRANSPORT_ERROR")

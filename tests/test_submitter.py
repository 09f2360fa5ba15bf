"""
Submitter Tests
"""

from unittest.mock import AsyncMock

import pytest

from networkcontrol.errors import DecodeError, NetworkError
from networkcontrol.governance import MessageKind, ServerType, Submitter, encode

from conftest import chain_id


@pytest.fixture
def message_hex():
    return encode(MessageKind.REMOVE_SERVER, chain_id(3), 1609459200000, ServerType.FEDERATED).hex()


class TestSubmitter:

    @pytest.mark.asyncio
    async def test_forwards_raw_hex(self, broadcaster, message_hex):
        submitter = Submitter(broadcaster)

        ack = await submitter.submit(f"  {message_hex.upper()}\n")

        assert broadcaster.sent == [message_hex]
        assert ack.message_hex == message_hex
        assert ack.response == "Successfully sent the message"
        assert ack.to_dict()["submitted_at"].endswith("+00:00")

    @pytest.mark.asyncio
    async def test_malformed_message_not_broadcast(self):
        broadcaster = AsyncMock()
        submitter = Submitter(broadcaster)

        with pytest.raises(DecodeError):
            await submitter.submit("00ff")
        with pytest.raises(DecodeError):
            await submitter.submit("zz")

        broadcaster.send_raw_message.assert_not_called()

    @pytest.mark.asyncio
    async def test_broadcast_failure_propagates(self, message_hex):
        broadcaster = AsyncMock()
        broadcaster.send_raw_message.side_effect = NetworkError("node unreachable")
        submitter = Submitter(broadcaster)

        with pytest.raises(NetworkError, match="node unreachable"):
            await submitter.submit(message_hex)

        broadcaster.send_raw_message.assert_awaited_once_with(message_hex)

    @pytest.mark.asyncio
    async def test_inner_whitespace_is_not_forwarded(self, broadcaster, message_hex):
        spaced = " ".join(message_hex[i:i + 2] for i in range(0, len(message_hex), 2))

        ack = await Submitter(broadcaster).submit(spaced)

        assert broadcaster.sent == [message_hex]
        assert ack.message_hex == message_hex

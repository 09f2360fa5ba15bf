"""
Message Codec Tests

Validates the 42-byte body layout, input validation on encode, rejection
of malformed input on decode, and the signature block of signed messages.
"""

import pytest

from networkcontrol.errors import DecodeError, ValidationError
from networkcontrol.governance import (
    GovernanceMessage,
    MessageKind,
    ServerType,
    Signature,
    decode,
    decode_hex,
    encode,
    encode_message,
)
from networkcontrol.governance.codec import BODY_SIZE, decode_varint, encode_varint

CHAIN = "ab" * 32
TIMESTAMP = 1609459200000


# =============================================================================
# Encode
# =============================================================================

class TestEncode:
    """Body layout and validation"""

    def test_body_layout(self):
        body = encode(MessageKind.ADD_SERVER, CHAIN, TIMESTAMP, ServerType.AUDIT)

        assert len(body) == BODY_SIZE == 42
        assert body[0] == 0
        assert body[1:9] == TIMESTAMP.to_bytes(8, "big")
        assert body[9:41] == bytes.fromhex(CHAIN)
        assert body[41] == 1

    def test_remove_server_federated_tags(self):
        body = encode(MessageKind.REMOVE_SERVER, CHAIN, 0, ServerType.FEDERATED)

        assert body[0] == 1
        assert body[41] == 0

    def test_accepts_operator_names_and_string_timestamp(self):
        body = encode("remove", CHAIN.upper(), str(TIMESTAMP), "audit")

        assert body == encode(MessageKind.REMOVE_SERVER, CHAIN, TIMESTAMP, ServerType.AUDIT)

    @pytest.mark.parametrize("chain", ["ab" * 31, "ab" * 33, "", "zz" * 32, "abc"])
    def test_rejects_bad_chain_id(self, chain):
        with pytest.raises(ValidationError):
            encode(MessageKind.ADD_SERVER, chain, TIMESTAMP, ServerType.FEDERATED)

    @pytest.mark.parametrize("timestamp", ["-1", -5, "abc", "", "1.5", None, 1 << 64])
    def test_rejects_bad_timestamp(self, timestamp):
        with pytest.raises(ValidationError):
            encode(MessageKind.ADD_SERVER, CHAIN, timestamp, ServerType.FEDERATED)

    @pytest.mark.parametrize("server_type", [2, -1, "observer"])
    def test_rejects_bad_server_type(self, server_type):
        with pytest.raises(ValidationError):
            encode(MessageKind.ADD_SERVER, CHAIN, TIMESTAMP, server_type)

    def test_rejects_bad_kind(self):
        with pytest.raises(ValidationError):
            encode("promote", CHAIN, TIMESTAMP, ServerType.FEDERATED)


# =============================================================================
# Decode
# =============================================================================

class TestDecode:
    """Inverse of encode plus malformed-input rejection"""

    @pytest.mark.parametrize("kind", list(MessageKind))
    @pytest.mark.parametrize("server_type", list(ServerType))
    def test_reproduces_encoded_fields(self, kind, server_type):
        message = decode(encode(kind, CHAIN, TIMESTAMP, server_type))

        assert message.kind == kind
        assert message.target_chain_id_hex == CHAIN
        assert message.timestamp == TIMESTAMP
        assert message.server_type == server_type
        assert message.signatures == ()

    def test_extreme_timestamps(self):
        for ts in (0, (1 << 64) - 1):
            assert decode(encode(MessageKind.ADD_SERVER, CHAIN, ts, ServerType.AUDIT)).timestamp == ts

    def test_rejects_truncated_input(self):
        body = encode(MessageKind.ADD_SERVER, CHAIN, TIMESTAMP, ServerType.AUDIT)

        with pytest.raises(DecodeError, match="too short"):
            decode(body[:-1])
        with pytest.raises(DecodeError):
            decode(b"")

    def test_rejects_unknown_kind(self):
        body = bytearray(encode(MessageKind.ADD_SERVER, CHAIN, TIMESTAMP, ServerType.AUDIT))
        body[0] = 7

        with pytest.raises(DecodeError, match="Invalid message type"):
            decode(bytes(body))

    def test_rejects_unknown_server_type(self):
        body = bytearray(encode(MessageKind.ADD_SERVER, CHAIN, TIMESTAMP, ServerType.AUDIT))
        body[41] = 2

        with pytest.raises(DecodeError, match="Invalid server type"):
            decode(bytes(body))

    def test_rejects_bad_hex(self):
        with pytest.raises(DecodeError, match="not valid hex"):
            decode_hex("not hex at all")


# =============================================================================
# Signed Messages
# =============================================================================

class TestSignatureBlock:
    """Varint count followed by 96-byte key/signature entries"""

    def _signed(self, count):
        message = GovernanceMessage(
            kind=MessageKind.ADD_SERVER,
            timestamp=TIMESTAMP,
            target_chain_id=bytes.fromhex(CHAIN),
            server_type=ServerType.FEDERATED,
        )
        for i in range(count):
            message = message.with_signature(Signature(bytes([i]) * 32, bytes([i]) * 64))
        return message

    def test_unsigned_message_is_bare_body(self):
        assert len(encode_message(self._signed(0))) == BODY_SIZE

    def test_signatures_survive_encoding(self):
        message = self._signed(3)
        data = encode_message(message)

        assert len(data) == BODY_SIZE + 1 + 3 * 96
        assert decode(data) == message

    def test_explicit_empty_block(self):
        data = encode_message(self._signed(0)) + b"\x00"
        assert decode(data).signatures == ()

    def test_rejects_short_signature_block(self):
        data = encode_message(self._signed(2))

        with pytest.raises(DecodeError, match="declares 2 signatures"):
            decode(data[:-1])

    def test_rejects_trailing_bytes(self):
        data = encode_message(self._signed(1))

        with pytest.raises(DecodeError):
            decode(data + b"\x00")


class TestVarint:

    @pytest.mark.parametrize("value,encoded", [
        (0, b"\x00"),
        (1, b"\x01"),
        (127, b"\x7f"),
        (128, b"\x81\x00"),
        (300, b"\x82\x2c"),
    ])
    def test_known_encodings(self, value, encoded):
        assert encode_varint(value) == encoded
        assert decode_varint(encoded) == (value, len(encoded))

    def test_truncated_varint(self):
        with pytest.raises(DecodeError, match="Truncated"):
            decode_varint(b"\x81")

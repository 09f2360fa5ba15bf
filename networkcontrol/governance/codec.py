# networkcontrol/governance/codec.py
"""
Message Codec - binary layout of authority-change requests

Body layout (big-endian):

    offset  size  field
    0       1     kind tag (0 = AddServer, 1 = RemoveServer)
    1       8     timestamp, milliseconds since epoch
    9       32    target chain ID
    41      1     target server type (0 = Federated, 1 = Audit)

A signed message appends a signature block to the body: a varint count
followed by count x (32-byte public key + 64-byte signature). A bare body
decodes as a message with no signatures.
"""

import struct
from typing import List, Tuple, Union

from networkcontrol.errors import DecodeError, ValidationError
from .messages import (
    CHAIN_ID_SIZE,
    PUBLIC_KEY_SIZE,
    SIGNATURE_SIZE,
    GovernanceMessage,
    MessageKind,
    ServerType,
    Signature,
)

_TIMESTAMP = struct.Struct(">Q")
BODY_SIZE = 1 + _TIMESTAMP.size + CHAIN_ID_SIZE + 1
SIGNATURE_ENTRY_SIZE = PUBLIC_KEY_SIZE + SIGNATURE_SIZE
MAX_VARINT_BYTES = 10


# =============================================================================
# Varint
# =============================================================================

def encode_varint(value: int) -> bytes:
    """Base-128 varint, most significant group first, high bit = more bytes follow"""
    if value < 0:
        raise ValueError("varint cannot encode negative values")
    groups = [value & 0x7F]
    value >>= 7
    while value:
        groups.append(value & 0x7F)
        value >>= 7
    groups.reverse()
    return bytes([g | 0x80 for g in groups[:-1]] + [groups[-1]])


def decode_varint(data: bytes, offset: int = 0) -> Tuple[int, int]:
    """Decode a varint at offset; returns (value, next_offset)"""
    value = 0
    for i in range(MAX_VARINT_BYTES):
        pos = offset + i
        if pos >= len(data):
            raise DecodeError("Truncated varint in signature block", context={"offset": offset})
        byte = data[pos]
        value = (value << 7) | (byte & 0x7F)
        if not byte & 0x80:
            return value, pos + 1
    raise DecodeError("Varint exceeds maximum length", context={"offset": offset})


# =============================================================================
# Field Validation
# =============================================================================

def parse_chain_id(chain_id: Union[str, bytes]) -> bytes:
    """Accept a 64-char hex string or 32 raw bytes"""
    if isinstance(chain_id, bytes):
        raw = chain_id
    else:
        try:
            raw = bytes.fromhex(chain_id.strip())
        except ValueError as e:
            raise ValidationError(
                "Chain ID must be hex encoded",
                original_error=e,
                context={"chain_id": chain_id}
            )
    if len(raw) != CHAIN_ID_SIZE:
        raise ValidationError(
            f"Chain ID must be {CHAIN_ID_SIZE} bytes, got {len(raw)}",
            context={"length": len(raw)}
        )
    return raw


def parse_timestamp(timestamp: Union[int, str]) -> int:
    """Accept a non-negative integer (or its decimal string) of milliseconds"""
    if isinstance(timestamp, bool):
        raise ValidationError("Timestamp must be an integer", context={"timestamp": timestamp})
    try:
        value = int(timestamp.strip()) if isinstance(timestamp, str) else int(timestamp)
    except (TypeError, ValueError) as e:
        raise ValidationError(
            f"Timestamp is not an integer: {timestamp!r}",
            original_error=e,
            context={"timestamp": str(timestamp)}
        )
    if isinstance(timestamp, float) and timestamp != value:
        raise ValidationError("Timestamp must be whole milliseconds", context={"timestamp": timestamp})
    if value < 0:
        raise ValidationError("Timestamp must not be negative", context={"timestamp": value})
    if value >= 1 << 64:
        raise ValidationError("Timestamp does not fit in 8 bytes", context={"timestamp": value})
    return value


def parse_kind(kind: Union[MessageKind, int, str]) -> MessageKind:
    try:
        if isinstance(kind, str):
            return MessageKind.from_action(kind)
        return MessageKind(kind)
    except ValueError as e:
        raise ValidationError(f"Unknown message kind: {kind!r}", original_error=e)


def parse_server_type(server_type: Union[ServerType, int, str]) -> ServerType:
    try:
        if isinstance(server_type, str):
            return ServerType.from_name(server_type)
        return ServerType(server_type)
    except ValueError as e:
        raise ValidationError(f"Unknown server type: {server_type!r}", original_error=e)


# =============================================================================
# Encode
# =============================================================================

def encode(
    kind: Union[MessageKind, int, str],
    target_chain_id: Union[str, bytes],
    timestamp_millis: Union[int, str],
    server_type: Union[ServerType, int, str]
) -> bytes:
    """
    Build the 42-byte body of an authority-change request.

    Raises:
        ValidationError: bad chain ID, timestamp, kind or server type
    """
    message = GovernanceMessage(
        kind=parse_kind(kind),
        timestamp=parse_timestamp(timestamp_millis),
        target_chain_id=parse_chain_id(target_chain_id),
        server_type=parse_server_type(server_type),
    )
    return encode_body(message)


def encode_body(message: GovernanceMessage) -> bytes:
    """Serialize every field of the message except its signatures"""
    return b"".join((
        bytes([message.kind.value]),
        _TIMESTAMP.pack(message.timestamp),
        message.target_chain_id,
        bytes([message.server_type.value]),
    ))


def encode_message(message: GovernanceMessage) -> bytes:
    """Serialize a message with its signature block (bare body when unsigned)"""
    body = encode_body(message)
    if not message.signatures:
        return body

    parts: List[bytes] = [body, encode_varint(len(message.signatures))]
    for sig in message.signatures:
        parts.append(sig.public_key)
        parts.append(sig.signature)
    return b"".join(parts)


# =============================================================================
# Decode
# =============================================================================

def decode(data: bytes) -> GovernanceMessage:
    """
    Parse a body or a signed message.

    Raises:
        DecodeError: truncated input, trailing bytes or unknown tags
    """
    if len(data) < BODY_SIZE:
        raise DecodeError(
            f"Message too short: {len(data)} bytes, need at least {BODY_SIZE}",
            context={"length": len(data)}
        )

    try:
        kind = MessageKind(data[0])
    except ValueError as e:
        raise DecodeError(f"Invalid message type: {data[0]}", original_error=e)

    (timestamp,) = _TIMESTAMP.unpack_from(data, 1)
    chain_start = 1 + _TIMESTAMP.size
    target_chain_id = bytes(data[chain_start:chain_start + CHAIN_ID_SIZE])

    try:
        server_type = ServerType(data[BODY_SIZE - 1])
    except ValueError as e:
        raise DecodeError(f"Invalid server type: {data[BODY_SIZE - 1]}", original_error=e)

    signatures = _decode_signatures(data, BODY_SIZE) if len(data) > BODY_SIZE else ()

    return GovernanceMessage(
        kind=kind,
        timestamp=timestamp,
        target_chain_id=target_chain_id,
        server_type=server_type,
        signatures=signatures,
    )


def _decode_signatures(data: bytes, offset: int) -> Tuple[Signature, ...]:
    count, offset = decode_varint(data, offset)
    expected_end = offset + count * SIGNATURE_ENTRY_SIZE
    if expected_end != len(data):
        raise DecodeError(
            f"Signature block declares {count} signatures but has "
            f"{len(data) - offset} bytes",
            context={"count": count, "length": len(data)}
        )

    signatures = []
    for start in range(offset, expected_end, SIGNATURE_ENTRY_SIZE):
        key_end = start + PUBLIC_KEY_SIZE
        signatures.append(Signature(
            public_key=bytes(data[start:key_end]),
            signature=bytes(data[key_end:start + SIGNATURE_ENTRY_SIZE]),
        ))
    return tuple(signatures)


def decode_hex(message_hex: str) -> GovernanceMessage:
    """Decode a hex-encoded message"""
    return decode(from_hex(message_hex, "message"))


def from_hex(value: str, field_name: str) -> bytes:
    try:
        return bytes.fromhex(value.strip())
    except (AttributeError, ValueError) as e:
        raise DecodeError(
            f"{field_name} is not valid hex",
            original_error=e,
            context={"field": field_name}
        )

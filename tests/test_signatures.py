"""
Signature Collector Tests
"""

import pytest

from networkcontrol.errors import DecodeError, SignatureError
from networkcontrol.governance import (
    MessageKind,
    ServerType,
    Signature,
    add_signature,
    check_signatures,
    decode,
    encode,
    encode_body,
    sign_message,
    signable_payload,
)
from networkcontrol.governance.codec import BODY_SIZE
from networkcontrol.governance.signatures import (
    load_private_key,
    public_key_bytes,
    verify_signature,
)

from conftest import chain_id


@pytest.fixture
def message():
    return decode(encode(MessageKind.ADD_SERVER, chain_id(9), 1609459200000, ServerType.FEDERATED))


class TestAddSignature:

    def test_valid_signature_is_appended(self, message, keys):
        sig = sign_message(message, keys[0])

        signed = add_signature(message, sig.public_key, sig.signature)

        assert signed.signatures == (sig,)
        assert message.signatures == ()

    def test_signatures_accumulate_in_order(self, message, keys):
        signed = message
        for key in keys[:3]:
            sig = sign_message(message, key)
            signed = add_signature(signed, sig.public_key, sig.signature)

        assert [s.public_key for s in signed.signatures] == [public_key_bytes(k) for k in keys[:3]]

    def test_payload_ignores_existing_signatures(self, message, keys):
        sig = sign_message(message, keys[0])
        signed = add_signature(message, sig.public_key, sig.signature)

        assert signable_payload(signed) == signable_payload(message)

    def test_signature_over_other_payload_is_rejected(self, message, keys):
        other = decode(encode(MessageKind.ADD_SERVER, chain_id(9), 1609459200001, ServerType.FEDERATED))
        sig = sign_message(other, keys[0])

        with pytest.raises(SignatureError, match="signature is invalid"):
            add_signature(message, sig.public_key, sig.signature)

    @pytest.mark.parametrize("index", range(BODY_SIZE))
    def test_altering_any_body_byte_breaks_signature(self, message, keys, index):
        sig = sign_message(message, keys[0])
        body = bytearray(encode_body(message))
        body[index] ^= 0x01

        try:
            altered = decode(bytes(body))
        except DecodeError:
            pytest.skip("altered byte is not a valid tag")

        with pytest.raises(SignatureError):
            add_signature(altered, sig.public_key, sig.signature)

    def test_signature_under_wrong_key_is_rejected(self, message, keys):
        sig = sign_message(message, keys[0])

        with pytest.raises(SignatureError):
            add_signature(message, public_key_bytes(keys[1]), sig.signature)

    def test_wrong_lengths_are_rejected(self, message, keys):
        sig = sign_message(message, keys[0])

        with pytest.raises(SignatureError, match="Public key must be 32 bytes"):
            add_signature(message, sig.public_key[:31], sig.signature)
        with pytest.raises(SignatureError, match="Signature must be 64 bytes"):
            add_signature(message, sig.public_key, sig.signature + b"\x00")


class TestVerification:

    def test_check_signatures_flags_each_entry(self, message, keys):
        good = sign_message(message, keys[0])
        bad = sign_message(message, keys[1])
        tampered = message.with_signature(good).with_signature(
            Signature(public_key=bad.public_key, signature=bytes(64))
        )

        assert [valid for _, valid in check_signatures(tampered)] == [True, False]

    def test_verify_rejects_malformed_key(self):
        assert verify_signature(b"payload", b"\x00" * 5, b"\x00" * 64) is False

    def test_load_private_key_from_hex(self, keys):
        seed = "01" * 32
        assert public_key_bytes(load_private_key(seed)) == public_key_bytes(keys[0])

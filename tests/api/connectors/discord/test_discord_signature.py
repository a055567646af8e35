"""Testes da verificação Ed25519 das interações."""

from __future__ import annotations

import pytest
from cryptography.hazmat.primitives.asymmetric import ed25519

from api.connectors.discord.signature import (
    SIGNATURE_HEADER,
    TIMESTAMP_HEADER,
    Ed25519SignatureVerifier,
    get_header,
    verify_discord_signature,
)

BODY = b'{"type":1,"id":"1","token":"t"}'
TIMESTAMP = "1700000000"


def _sign(private_key: ed25519.Ed25519PrivateKey, timestamp: str, body: bytes) -> str:
    return private_key.sign(timestamp.encode("utf-8") + body).hex()


def _flip_bit(data: bytes, index: int = 0) -> bytes:
    mutated = bytearray(data)
    mutated[index] ^= 0x01
    return bytes(mutated)


class TestEd25519SignatureVerifier:
    def test_valid_signature(self, ed25519_keypair) -> None:
        private_key, public_hex = ed25519_keypair
        signature = _sign(private_key, TIMESTAMP, BODY)

        verifier = Ed25519SignatureVerifier(public_hex)

        assert verifier.verify(BODY, TIMESTAMP, signature) is True
        assert verifier.check(BODY, TIMESTAMP, signature).error is None

    @pytest.mark.parametrize("index", [0, 10, len(BODY) - 1])
    def test_body_bit_flip_fails(self, ed25519_keypair, index: int) -> None:
        private_key, public_hex = ed25519_keypair
        signature = _sign(private_key, TIMESTAMP, BODY)

        result = Ed25519SignatureVerifier(public_hex).check(
            _flip_bit(BODY, index), TIMESTAMP, signature
        )

        assert result.valid is False
        assert result.error == "signature_mismatch"

    def test_timestamp_change_fails(self, ed25519_keypair) -> None:
        private_key, public_hex = ed25519_keypair
        signature = _sign(private_key, TIMESTAMP, BODY)

        assert Ed25519SignatureVerifier(public_hex).verify(BODY, "1700000001", signature) is False

    def test_signature_bit_flip_fails(self, ed25519_keypair) -> None:
        private_key, public_hex = ed25519_keypair
        signature = bytes.fromhex(_sign(private_key, TIMESTAMP, BODY))

        assert (
            Ed25519SignatureVerifier(public_hex).verify(BODY, TIMESTAMP, _flip_bit(signature).hex())
            is False
        )

    def test_other_key_fails(self, ed25519_keypair) -> None:
        _, public_hex = ed25519_keypair
        other = ed25519.Ed25519PrivateKey.generate()

        assert (
            Ed25519SignatureVerifier(public_hex).verify(BODY, TIMESTAMP, _sign(other, TIMESTAMP, BODY))
            is False
        )

    @pytest.mark.parametrize(
        ("timestamp", "signature", "error"),
        [
            (None, "00" * 64, "missing_signature_headers"),
            (TIMESTAMP, None, "missing_signature_headers"),
            (TIMESTAMP, "zz" * 64, "malformed_hex"),
            (TIMESTAMP, "abc", "malformed_hex"),
            (TIMESTAMP, "00" * 32, "invalid_signature_length"),
        ],
    )
    def test_malformed_inputs_return_false(
        self, ed25519_keypair, timestamp, signature, error
    ) -> None:
        _, public_hex = ed25519_keypair

        result = Ed25519SignatureVerifier(public_hex).check(BODY, timestamp, signature)

        assert result.valid is False
        assert result.error == error

    @pytest.mark.parametrize("separator", [" ", "\n", "\t"])
    def test_valid_signature_with_whitespace_is_malformed(
        self, ed25519_keypair, separator: str
    ) -> None:
        private_key, public_hex = ed25519_keypair
        signature = _sign(private_key, TIMESTAMP, BODY)
        spaced = separator.join(signature[i : i + 2] for i in range(0, len(signature), 2))

        result = Ed25519SignatureVerifier(public_hex).check(BODY, TIMESTAMP, spaced)

        assert result.valid is False
        assert result.error == "malformed_hex"

    def test_malformed_public_key(self) -> None:
        result = Ed25519SignatureVerifier("ab" * 16).check(BODY, TIMESTAMP, "00" * 64)
        assert result.error == "invalid_public_key_length"

    def test_injected_primitive_receives_timestamp_and_body(self) -> None:
        calls: list[tuple[bytes, bytes, bytes]] = []

        def primitive(public_key: bytes, signature: bytes, message: bytes) -> bool:
            calls.append((public_key, signature, message))
            return True

        verifier = Ed25519SignatureVerifier("11" * 32, verify_primitive=primitive)

        assert verifier.verify(BODY, TIMESTAMP, "22" * 64) is True
        assert calls == [(b"\x11" * 32, b"\x22" * 64, TIMESTAMP.encode() + BODY)]

    def test_primitive_error_degrades_to_false(self) -> None:
        def primitive(public_key: bytes, signature: bytes, message: bytes) -> bool:
            raise RuntimeError("boom")

        result = Ed25519SignatureVerifier("11" * 32, verify_primitive=primitive).check(
            BODY, TIMESTAMP, "22" * 64
        )

        assert result.valid is False
        assert result.error == "verification_error"


class TestVerifyDiscordSignature:
    def test_reads_headers_case_insensitively(self, ed25519_keypair) -> None:
        private_key, public_hex = ed25519_keypair
        headers = {
            SIGNATURE_HEADER.lower(): _sign(private_key, TIMESTAMP, BODY),
            TIMESTAMP_HEADER.upper(): TIMESTAMP,
        }

        assert verify_discord_signature(BODY, headers, public_hex).valid is True

    def test_missing_public_key(self) -> None:
        result = verify_discord_signature(BODY, {}, None)
        assert result.valid is False
        assert result.error == "public_key_not_configured"

    def test_skip_verify_bypasses_check(self) -> None:
        result = verify_discord_signature(BODY, {}, None, skip_verify=True)
        assert result.valid is True
        assert result.skipped is True

    def test_get_header_missing(self) -> None:
        assert get_header({"a": "1"}, "b") is None

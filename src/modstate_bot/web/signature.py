from __future__ import annotations

from nacl.exceptions import BadSignatureError
from nacl.signing import VerifyKey

from ..core.exceptions import ConfigError

SIGNATURE_HEADER = "X-Signature-Ed25519"
TIMESTAMP_HEADER = "X-Signature-Timestamp"


class SignatureVerifier:
    """Checks Discord's Ed25519 request signatures against the app public key."""

    def __init__(self, public_key_hex: str) -> None:
        try:
            self._verify_key = VerifyKey(bytes.fromhex(public_key_hex))
        except (TypeError, ValueError) as exc:
            raise ConfigError(
                "Discord public key must be a 32-byte hex string"
            ) from exc

    def verify(self, signature_hex: str, timestamp: str, body: bytes) -> bool:
        try:
            signature = bytes.fromhex(signature_hex)
            self._verify_key.verify(timestamp.encode("utf-8") + body, signature)
        except (BadSignatureError, TypeError, ValueError):
            return False
        return True

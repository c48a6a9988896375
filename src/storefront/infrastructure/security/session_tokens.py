"""Signed, time-limited session tokens.

Format: ``header.payload.signature``, each part URL-safe base64
without padding. The signature is HMAC-SHA256 over
``header.payload`` with a server-held secret.

Payload claims:
- ``sub``: user id
- ``iat`` / ``exp``: issue and expiry time (unix seconds)
- ``jti``: random token id

Nothing else is trusted from the payload; in particular the user's role
is always re-read from the credential store.
"""

from __future__ import annotations

import base64
import binascii
import json
import secrets
import time
from dataclasses import dataclass
from typing import Any

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, hmac

from storefront.domain.exceptions import UnauthenticatedError

_HEADER = {"alg": "HS256", "typ": "JWT"}


@dataclass(frozen=True)
class SessionClaims:
    user_id: str
    issued_at: int
    expires_at: int
    token_id: str


class SessionTokenSigner:

    def __init__(self, secret: str | bytes, ttl_seconds: int) -> None:
        if not secret:
            raise ValueError("Session secret must not be empty")
        if ttl_seconds <= 0:
            raise ValueError("Session TTL must be positive")
        self._secret = secret.encode() if isinstance(secret, str) else secret
        self._ttl = ttl_seconds

    @property
    def ttl_seconds(self) -> int:
        return self._ttl

    def issue(self, user_id: str, now: int | None = None) -> str:
        now = int(time.time()) if now is None else now
        payload = {
            "sub": user_id,
            "iat": now,
            "exp": now + self._ttl,
            "jti": secrets.token_urlsafe(16),
        }
        header_b64 = _b64encode_json(_HEADER)
        payload_b64 = _b64encode_json(payload)
        message = f"{header_b64}.{payload_b64}".encode()
        signature_b64 = _b64encode(self._sign(message))
        return f"{header_b64}.{payload_b64}.{signature_b64}"

    def verify(self, token: str, now: int | None = None) -> SessionClaims:
        """Check format, signature and expiry; return the claims.

        Every failure raises UnauthenticatedError with a generic message.
        """
        try:
            header_b64, payload_b64, signature_b64 = token.split(".")
        except (AttributeError, ValueError):
            raise UnauthenticatedError("Invalid Token or Session Expired")

        try:
            signature = _b64decode(signature_b64)
        except (binascii.Error, ValueError):
            raise UnauthenticatedError("Invalid Token or Session Expired")

        message = f"{header_b64}.{payload_b64}".encode()
        if not self._verify_signature(message, signature):
            raise UnauthenticatedError("Invalid Token or Session Expired")

        try:
            header = _b64decode_json(header_b64)
            payload = _b64decode_json(payload_b64)
            if header.get("alg") != _HEADER["alg"]:
                raise UnauthenticatedError("Invalid Token or Session Expired")
            claims = SessionClaims(
                user_id=str(payload["sub"]),
                issued_at=int(payload["iat"]),
                expires_at=int(payload["exp"]),
                token_id=str(payload.get("jti", "")),
            )
        except (KeyError, TypeError, ValueError, binascii.Error):
            raise UnauthenticatedError("Invalid Token or Session Expired")

        now = int(time.time()) if now is None else now
        if claims.expires_at <= now:
            raise UnauthenticatedError("Invalid Token or Session Expired")
        return claims

    # --- Internal helpers -----------------------------------------------------

    def _sign(self, message: bytes) -> bytes:
        mac = hmac.HMAC(self._secret, hashes.SHA256())
        mac.update(message)
        return mac.finalize()

    def _verify_signature(self, message: bytes, signature: bytes) -> bool:
        mac = hmac.HMAC(self._secret, hashes.SHA256())
        mac.update(message)
        try:
            mac.verify(signature)
        except InvalidSignature:
            return False
        return True


def _b64encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode()


def _b64decode(data: str) -> bytes:
    padding = -len(data) % 4
    return base64.urlsafe_b64decode(data + "=" * padding)


def _b64encode_json(data: dict[str, Any]) -> str:
    return _b64encode(json.dumps(data, separators=(",", ":"), sort_keys=True).encode())


def _b64decode_json(data: str) -> dict[str, Any]:
    decoded = json.loads(_b64decode(data))
    if not isinstance(decoded, dict):
        raise ValueError("Token part is not a JSON object")
    return decoded

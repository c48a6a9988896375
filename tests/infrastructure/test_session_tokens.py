import base64
import json

import pytest

from storefront.domain.exceptions import UnauthenticatedError
from storefront.infrastructure.security.session_tokens import SessionTokenSigner

NOW = 1_700_000_000


def _b64(data: dict) -> str:
    raw = json.dumps(data, separators=(",", ":")).encode()
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


class TestIssueAndVerify:

    def test_round_trip_claims(self):
        signer = SessionTokenSigner("secret", ttl_seconds=60)
        token = signer.issue("u1", now=NOW)

        claims = signer.verify(token, now=NOW + 30)

        assert claims.user_id == "u1"
        assert claims.issued_at == NOW
        assert claims.expires_at == NOW + 60
        assert claims.token_id

    def test_three_unpadded_parts(self):
        token = SessionTokenSigner("secret", 60).issue("u1", now=NOW)
        parts = token.split(".")
        assert len(parts) == 3
        assert not any("=" in p for p in parts)

    def test_each_token_is_unique(self):
        signer = SessionTokenSigner("secret", 60)
        assert signer.issue("u1", now=NOW) != signer.issue("u1", now=NOW)


class TestRejection:

    def test_expired_exactly_at_exp(self):
        signer = SessionTokenSigner("secret", 60)
        token = signer.issue("u1", now=NOW)
        with pytest.raises(UnauthenticatedError, match="Session Expired"):
            signer.verify(token, now=NOW + 60)

    def test_wrong_secret(self):
        token = SessionTokenSigner("secret", 60).issue("u1", now=NOW)
        with pytest.raises(UnauthenticatedError):
            SessionTokenSigner("other", 60).verify(token, now=NOW)

    def test_payload_swapped_for_another_user(self):
        signer = SessionTokenSigner("secret", 60)
        header, _, signature = signer.issue("u1", now=NOW).split(".")
        forged_payload = _b64({"sub": "admin", "iat": NOW, "exp": NOW + 60, "jti": "x"})
        with pytest.raises(UnauthenticatedError):
            signer.verify(f"{header}.{forged_payload}.{signature}", now=NOW)

    @pytest.mark.parametrize("token", ["", "abc", "a.b", "a.b.c.d", "a.b.!!!"])
    def test_malformed(self, token):
        with pytest.raises(UnauthenticatedError):
            SessionTokenSigner("secret", 60).verify(token, now=NOW)

    def test_all_failures_share_one_message(self):
        signer = SessionTokenSigner("secret", 60)
        token = signer.issue("u1", now=NOW)
        messages = set()
        for bad in ("junk", token + "x"):
            with pytest.raises(UnauthenticatedError) as exc:
                signer.verify(bad, now=NOW)
            messages.add(str(exc.value))
        with pytest.raises(UnauthenticatedError) as exc:
            signer.verify(token, now=NOW + 3600)
        messages.add(str(exc.value))
        assert messages == {"Invalid Token or Session Expired"}


class TestConstruction:

    def test_empty_secret(self):
        with pytest.raises(ValueError):
            SessionTokenSigner("", 60)

    def test_non_positive_ttl(self):
        with pytest.raises(ValueError):
            SessionTokenSigner("secret", 0)

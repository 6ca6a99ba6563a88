"""
Test suite for PKCE material and the pre_auth cookie.

Coverage:
- Verifier length and alphabet, S256 challenge derivation
- State nonce uniqueness
- pre_auth wire format and decoding of damaged cookies
- State binding: mismatch, staleness and absence all fail closed

Test types: Unit
"""

import base64
import hashlib
import json
import re
from urllib.parse import unquote

import pytest

from oauth_relay.exceptions import InvalidStateError
from oauth_relay.services.auth import (
    PRE_AUTH_TTL_SECONDS,
    create_code_challenge,
    decode_pending_auth,
    encode_pending_auth,
    generate_code_verifier,
    generate_pkce_pair,
    generate_state,
    verify_pending_auth,
)
from oauth_relay.services.auth.pending import new_pending_auth

URL_SAFE = re.compile(r"^[A-Za-z0-9_-]+$")


@pytest.mark.unit
class TestCodeVerifier:
    def test_verifier_is_unpadded_base64url_of_64_bytes(self):
        verifier = generate_code_verifier()
        assert URL_SAFE.match(verifier)
        assert len(verifier) == 86

    def test_verifiers_are_unique(self):
        assert len({generate_code_verifier() for _ in range(50)}) == 50

    def test_short_verifiers_are_refused(self):
        with pytest.raises(ValueError):
            generate_code_verifier(16)


@pytest.mark.unit
class TestCodeChallenge:
    def test_challenge_is_s256_of_verifier(self):
        verifier = generate_code_verifier()
        digest = hashlib.sha256(verifier.encode("ascii")).digest()
        expected = base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")

        assert create_code_challenge(verifier) == expected

    def test_rfc7636_appendix_b_vector(self):
        verifier = "dBjftJeZ4CVP-mB92K27uhbUJU1p1r_wW1gFWFOEjXk"
        assert (
            create_code_challenge(verifier)
            == "E9Melhoa2OwvFrEMTJguCHaoeK1t8URWbuGJSstw-cM"
        )

    def test_plain_method_is_rejected(self):
        with pytest.raises(ValueError):
            create_code_challenge("verifier", method="plain")


@pytest.mark.unit
class TestState:
    def test_state_is_a_uuid4(self):
        state = generate_state()
        assert re.match(
            r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
            state,
        )

    def test_pair_is_self_consistent(self):
        pair = generate_pkce_pair()
        assert pair.code_challenge == create_code_challenge(pair.code_verifier)
        assert pair.code_verifier not in pair.code_challenge


@pytest.mark.unit
@pytest.mark.security
class TestPendingAuthCookie:
    def test_wire_format_is_percent_encoded_compact_json(self):
        pending = new_pending_auth("s-1", "v-1", "acme", now_ms=1700000000000)
        raw = encode_pending_auth(pending)

        assert "{" not in raw and '"' not in raw
        assert json.loads(unquote(raw)) == {
            "state": "s-1",
            "codeVerifier": "v-1",
            "app": "acme",
            "t": 1700000000000,
        }
        assert unquote(raw) == (
            '{"state":"s-1","codeVerifier":"v-1","app":"acme","t":1700000000000}'
        )

    def test_decode_round_trip(self):
        pending = new_pending_auth("s-1", "v-1", "acme")
        assert decode_pending_auth(encode_pending_auth(pending)) == pending

    @pytest.mark.parametrize(
        "raw",
        [None, "", "not-json", "%5B1%2C2%5D", '{"state":"s"}', "%7B%22state%22%3A1"],
    )
    def test_damaged_cookies_decode_to_none(self, raw):
        assert decode_pending_auth(raw) is None


@pytest.mark.unit
@pytest.mark.security
class TestVerifyPendingAuth:
    NOW_MS = 1700000000000

    def cookie(self, state="s-1", age_ms=0):
        pending = new_pending_auth(state, "v-1", "acme", now_ms=self.NOW_MS - age_ms)
        return encode_pending_auth(pending)

    def test_matching_state_returns_pending(self):
        pending = verify_pending_auth(self.cookie(), "s-1", now_ms=self.NOW_MS)
        assert pending.code_verifier == "v-1"
        assert pending.app == "acme"

    def test_mismatched_state_is_rejected(self):
        with pytest.raises(InvalidStateError) as exc_info:
            verify_pending_auth(self.cookie(), "s-2", now_ms=self.NOW_MS)
        assert exc_info.value.message == "Invalid state"
        assert exc_info.value.status_code == 400

    def test_absent_cookie_is_rejected(self):
        with pytest.raises(InvalidStateError):
            verify_pending_auth(None, "s-1", now_ms=self.NOW_MS)

    def test_stale_cookie_is_rejected(self):
        raw = self.cookie(age_ms=PRE_AUTH_TTL_SECONDS * 1000 + 1)
        with pytest.raises(InvalidStateError):
            verify_pending_auth(raw, "s-1", now_ms=self.NOW_MS)

    def test_cookie_at_ttl_boundary_is_accepted(self):
        raw = self.cookie(age_ms=PRE_AUTH_TTL_SECONDS * 1000)
        assert verify_pending_auth(raw, "s-1", now_ms=self.NOW_MS).state == "s-1"

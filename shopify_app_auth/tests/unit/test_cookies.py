"""
Unit tests for SignedCookieJar.

Tests cover:
- Round-trip of signed values
- Tampering with value or signature
- Expiry bound into the signature
- Key rotation
- Deletion headers
"""

import string
from datetime import datetime, timedelta, timezone

import pytest

from shopify_app_auth.errors import MissingRequiredArgument
from shopify_app_auth.platform.cookies import SignedCookieJar
from shopify_app_auth.platform.http import NormalizedRequest
from shopify_app_auth.tests.mocks.browser import MockBrowser

KEYS = ["primary-key"]


def _set_and_collect(keys, name, value, **kwargs) -> MockBrowser:
    jar = SignedCookieJar(None, keys=keys)
    jar.set_signed(name, value, **kwargs)
    browser = MockBrowser()
    browser.receive(jar.response_headers)
    return browser


def _jar_for(browser: MockBrowser, keys=KEYS) -> SignedCookieJar:
    return SignedCookieJar(browser.request("/"), keys=keys)


def _mutate(char: str) -> str:
    alphabet = string.ascii_letters + string.digits
    return alphabet[(alphabet.index(char) + 1) % len(alphabet)] if char in alphabet else "A"


class TestSignedCookieJar:
    """Tests for signing and verification."""

    def test_requires_keys(self):
        with pytest.raises(MissingRequiredArgument):
            SignedCookieJar(None, keys=[])

    def test_rejects_empty_key(self):
        with pytest.raises(MissingRequiredArgument):
            SignedCookieJar(None, keys=["primary", ""])

    def test_round_trip(self):
        browser = _set_and_collect(KEYS, "state", "abc123")

        assert _jar_for(browser).get_verified("state") == "abc123"

    def test_round_trip_with_special_characters(self):
        value = "offline_shop1.myshopify.io; x=\"y\" ü"
        browser = _set_and_collect(KEYS, "session", value)

        assert _jar_for(browser).get_verified("session") == value

    def test_writes_value_and_signature_cookies(self):
        jar = SignedCookieJar(None, keys=KEYS)
        jar.set_signed("state", "abc123", path="/auth/callback")

        headers = [value for name, value in jar.response_headers if name == "Set-Cookie"]
        assert len(headers) == 2
        assert headers[0].startswith("state=abc123")
        assert headers[1].startswith("state.sig=")
        for header in headers:
            assert "Path=/auth/callback" in header
            assert "Secure" in header
            assert "HttpOnly" in header
            assert "SameSite=Lax" in header

    def test_expires_attribute(self):
        jar = SignedCookieJar(None, keys=KEYS)
        jar.set_signed("state", "abc123", expires=datetime.now(timezone.utc) + timedelta(minutes=1))

        assert "expires=" in jar.response_headers[0][1]

    def test_missing_cookie_returns_none(self):
        jar = SignedCookieJar(NormalizedRequest(method="GET", url="/"), keys=KEYS)

        assert jar.get_verified("state") is None

    def test_missing_signature_returns_none(self):
        browser = _set_and_collect(KEYS, "state", "abc123")
        browser.cookies.pop("state.sig")

        assert _jar_for(browser).get_verified("state") is None

    def test_unsigned_cookie_returns_none(self):
        request = NormalizedRequest(method="GET", url="/", headers={"Cookie": "state=abc123"})

        assert SignedCookieJar(request, keys=KEYS).get_verified("state") is None

    @pytest.mark.parametrize("value", ["abc123XYZ", "a/b \u00fc;=\""])
    def test_every_single_character_mutation_of_value_is_rejected(self, value):
        browser = _set_and_collect(KEYS, "state", value)
        original = browser.cookies["state"]

        for index, char in enumerate(original):
            browser.cookies["state"] = original[:index] + _mutate(char) + original[index + 1:]
            assert _jar_for(browser).get_verified("state") is None

    def test_value_is_stored_percent_encoded(self):
        browser = _set_and_collect(KEYS, "state", "a/b")

        assert browser.cookies["state"] == "a%2Fb"

    def test_alternate_encoding_of_same_value_is_rejected(self):
        browser = _set_and_collect(KEYS, "state", "a/b")
        browser.cookies["state"] = "a%2fb"

        assert _jar_for(browser).get_verified("state") is None

    def test_percent_escaped_signature_is_rejected(self):
        browser = _set_and_collect(KEYS, "state", "abc123")
        expires, _, signature = browser.cookies["state.sig"].partition(".")
        browser.cookies["state.sig"] = f"{expires}.%{ord(signature[0]):02X}{signature[1:]}"

        assert _jar_for(browser).get_verified("state") is None

    def test_mutated_signature_is_rejected(self):
        browser = _set_and_collect(KEYS, "state", "abc123")
        signature = browser.cookies["state.sig"]
        browser.cookies["state.sig"] = signature[:-1] + _mutate(signature[-1])

        assert _jar_for(browser).get_verified("state") is None

    def test_signature_bound_to_cookie_name(self):
        browser = _set_and_collect(KEYS, "state", "abc123")
        browser.cookies["other"] = browser.cookies["state"]
        browser.cookies["other.sig"] = browser.cookies["state.sig"]

        assert _jar_for(browser).get_verified("other") is None

    def test_expired_signature_is_rejected(self):
        # MockBrowser ignores the expires attribute and replays the pair anyway
        browser = _set_and_collect(
            KEYS, "state", "abc123", expires=datetime.now(timezone.utc) - timedelta(seconds=5)
        )

        assert "state" in browser.cookies
        assert _jar_for(browser).get_verified("state") is None

    def test_extended_expiry_is_rejected(self):
        expires = datetime.now(timezone.utc) + timedelta(minutes=1)
        browser = _set_and_collect(KEYS, "state", "abc123", expires=expires)
        _, _, signature = browser.cookies["state.sig"].partition(".")
        browser.cookies["state.sig"] = f"{int(expires.timestamp()) + 3600}.{signature}"

        assert _jar_for(browser).get_verified("state") is None

    def test_wrong_key_is_rejected(self):
        browser = _set_and_collect(["attacker-key"], "state", "abc123")

        assert _jar_for(browser).get_verified("state") is None


class TestKeyRotation:
    """Tests for verification with several keys."""

    def test_old_key_still_verifies(self):
        browser = _set_and_collect(["old-key"], "state", "abc123")

        assert _jar_for(browser, keys=["new-key", "old-key"]).get_verified("state") == "abc123"

    def test_signs_with_primary_key(self):
        browser = _set_and_collect(["new-key", "old-key"], "state", "abc123")

        assert _jar_for(browser, keys=["new-key"]).get_verified("state") == "abc123"
        assert _jar_for(browser, keys=["old-key"]).get_verified("state") is None


class TestDelete:
    """Tests for cookie deletion."""

    def test_delete_expires_both_cookies(self):
        jar = SignedCookieJar(None, keys=KEYS)
        jar.delete("state", path="/auth/callback")

        headers = [value for _, value in jar.response_headers]
        assert len(headers) == 2
        assert headers[0].startswith("state=")
        assert headers[1].startswith("state.sig=")
        for header in headers:
            assert "Max-Age=0" in header
            assert "1970" in header
            assert "Path=/auth/callback" in header

    def test_deleted_cookie_is_not_found(self):
        browser = _set_and_collect(KEYS, "state", "abc123")
        jar = _jar_for(browser)
        assert jar.get_verified("state") == "abc123"

        jar.delete("state")
        browser.receive(jar.response_headers)

        assert _jar_for(browser).get_verified("state") is None

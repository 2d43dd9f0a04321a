"""
Unit tests for ResendEmailSender adapter.

resend.Emails.send is patched; tests inspect the params handed to it.
"""

from unittest.mock import MagicMock, patch

import pytest
import resend

from witlt.adapters.mail.resend_sender import (
    EXISTING_ACCOUNT_SUBJECT,
    VERIFICATION_SUBJECT,
    ResendEmailSender,
)


@pytest.fixture
def send() -> MagicMock:
    with patch("witlt.adapters.mail.resend_sender.resend.Emails.send") as send_mock:
        send_mock.return_value = {"id": "email-123"}
        yield send_mock


@pytest.fixture
def sender() -> ResendEmailSender:
    return ResendEmailSender(
        api_key="re_test_key",
        sender="no-reply@witlt.test",
        app_url="https://witlt.test/",
        code_ttl_minutes=10,
    )


def sent_params(send: MagicMock) -> dict:
    send.assert_called_once()
    return send.call_args.args[0]


class TestConfiguration:
    def test_api_key_is_installed_on_sdk(self, sender) -> None:
        assert resend.api_key == "re_test_key"


class TestVerificationMail:
    """Tests for send_verification_code."""

    def test_envelope(self, sender, send) -> None:
        sender.send_verification_code("a@x.com", "012345")

        params = sent_params(send)
        assert params["subject"] == VERIFICATION_SUBJECT
        assert params["to"] == ["a@x.com"]
        assert params["from"] == "When Is The Last Time <no-reply@witlt.test>"

    def test_code_and_lifetime_in_both_bodies(self, sender, send) -> None:
        sender.send_verification_code("a@x.com", "012345")

        params = sent_params(send)
        for body in (params["text"], params["html"]):
            assert "012345" in body
            assert "10 minutes" in body


class TestExistingAccountNotice:
    """Tests for send_existing_account_notice."""

    def test_notice_links_to_password_reset(self, sender, send) -> None:
        sender.send_existing_account_notice("a@x.com")

        params = sent_params(send)
        assert params["subject"] == EXISTING_ACCOUNT_SUBJECT
        assert "https://witlt.test/reset-password" in params["text"]
        assert "https://witlt.test/reset-password" in params["html"]

    def test_notice_carries_no_code(self, sender, send) -> None:
        sender.send_existing_account_notice("a@x.com")

        assert "valid for" not in sent_params(send)["text"]


class TestDelivery:
    def test_sdk_errors_propagate(self, sender, send) -> None:
        send.side_effect = RuntimeError("Resend API unavailable")

        with pytest.raises(RuntimeError):
            sender.send_verification_code("a@x.com", "123456")

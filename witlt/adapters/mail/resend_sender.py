"""
Resend email sender adapter - Implements EmailSender protocol.

Renders the two registration mails as text + HTML bodies and hands them
to the Resend API. Errors raised by the SDK propagate to the caller.
"""

import logging
from html import escape

import resend

logger = logging.getLogger(__name__)

APP_NAME = "When Is The Last Time"

VERIFICATION_SUBJECT = f"[{APP_NAME}] Your registration code"
EXISTING_ACCOUNT_SUBJECT = f"[{APP_NAME}] Registration attempt on your account"


class ResendEmailSender:
    """
    Implements EmailSender protocol via the Resend SDK.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(
        self,
        api_key: str,
        sender: str,
        app_url: str,
        code_ttl_minutes: int = 10,
    ) -> None:
        resend.api_key = api_key
        self._sender = sender
        self._app_url = app_url.rstrip("/")
        self._code_ttl_minutes = code_ttl_minutes

    def send_verification_code(self, email: str, code: str) -> None:
        text = (
            f"{APP_NAME}\n\n"
            "Enter the following code to finish creating your account.\n\n"
            f"    {code}\n\n"
            f"This code is valid for {self._code_ttl_minutes} minutes.\n"
            "If you did not request this, you can ignore this email.\n\n"
            f"{APP_NAME} Support\n{self._app_url}\n"
        )
        html = f"""\
<!DOCTYPE html>
<html>
<body style="font-family: sans-serif; padding: 20px;">
  <div style="max-width: 600px; margin: 0 auto;">
    <h1 style="color: #3B82F6;">{APP_NAME}</h1>
    <p>Enter the following code to finish creating your account.</p>
    <div style="background: #F3F4F6; padding: 20px; text-align: center; margin: 20px 0; border-radius: 8px;">
      <span style="font-size: 32px; font-weight: bold; letter-spacing: 8px;">{escape(code)}</span>
    </div>
    <p style="color: #6B7280; font-size: 14px;">
      This code is valid for {self._code_ttl_minutes} minutes.<br>
      If you did not request this, you can ignore this email.
    </p>
    {self._footer_html()}
  </div>
</body>
</html>
"""
        self._send(email, VERIFICATION_SUBJECT, text, html)

    def send_existing_account_notice(self, email: str) -> None:
        reset_url = f"{self._app_url}/reset-password"
        text = (
            f"{APP_NAME}\n\n"
            "Someone tried to create a new account with your email address.\n\n"
            "If this was not you, you can ignore this email. Your account is safe.\n\n"
            f"Forgot your password? Reset it here: {reset_url}\n\n"
            f"{APP_NAME} Support\n{self._app_url}\n"
        )
        html = f"""\
<!DOCTYPE html>
<html>
<body style="font-family: sans-serif; padding: 20px;">
  <div style="max-width: 600px; margin: 0 auto;">
    <h1 style="color: #3B82F6;">{APP_NAME}</h1>
    <p>Someone tried to create a new account with your email address.</p>
    <div style="background: #FEF3C7; border-left: 4px solid #F59E0B; padding: 16px; margin: 20px 0;">
      <p style="margin: 0; color: #92400E;">
        <strong>Already have an account?</strong><br>
        If this was not you, you can ignore this email. Your account is safe.
      </p>
    </div>
    <p><strong>Forgot your password?</strong></p>
    <p>
      <a href="{escape(reset_url)}"
         style="display: inline-block; background: #3B82F6; color: white; padding: 12px 24px; text-decoration: none; border-radius: 6px;">
        Reset password
      </a>
    </p>
    {self._footer_html()}
  </div>
</body>
</html>
"""
        self._send(email, EXISTING_ACCOUNT_SUBJECT, text, html)

    def _footer_html(self) -> str:
        url = escape(self._app_url)
        return (
            '<hr style="border: none; border-top: 1px solid #E5E7EB; margin: 20px 0;">'
            f'<p style="color: #9CA3AF; font-size: 12px;">{APP_NAME} Support<br>'
            f'<a href="{url}">{url}</a></p>'
        )

    def _send(self, recipient: str, subject: str, text: str, html: str) -> None:
        params = {
            "from": f"{APP_NAME} <{self._sender}>",
            "to": [recipient],
            "subject": subject,
            "html": html,
            "text": text,
        }

        response = resend.Emails.send(params)

        logger.info("Sent '%s' to %s (Email ID: %s)", subject, recipient, response.get("id"))

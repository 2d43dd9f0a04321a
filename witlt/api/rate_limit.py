"""
Per-client request throttling.

Keyed on the remote address; the send-code limit is read from settings.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from witlt.config.settings import get_settings

limiter = Limiter(key_func=get_remote_address)


def send_code_limit() -> str:
    return get_settings().send_code_rate_limit

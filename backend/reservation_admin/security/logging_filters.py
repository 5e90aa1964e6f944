"""Logging filters that scrub guest contact details."""

from __future__ import annotations

import logging
import re

from reservation_admin.security.redact import mask_email, mask_phone

_EMAIL_PATTERN = re.compile(r"[\w.+-]+@[\w-]+(?:\.[\w-]+)+")
_PHONE_PATTERN = re.compile(r"(?<![\w:-])\+?\d[\d\s().-]{7,}\d(?![\w:-])")
_MIN_PHONE_DIGITS = 10


def _mask_phone_match(match: re.Match[str]) -> str:
    text = match.group(0)
    if sum(ch.isdigit() for ch in text) < _MIN_PHONE_DIGITS:
        return text
    return mask_phone(text) or ""


def scrub(message: str) -> str:
    """Mask every email address and phone number found in ``message``."""
    message = _EMAIL_PATTERN.sub(lambda match: mask_email(match.group(0)) or "", message)
    return _PHONE_PATTERN.sub(_mask_phone_match, message)


class SensitiveFilter(logging.Filter):
    """Replace contact details in log records with masked values."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.args:
            record.msg = record.getMessage()
            record.args = None
        if isinstance(record.msg, str):
            record.msg = scrub(record.msg)
        return True


def install_sensitive_filter(*logger_names: str) -> None:
    """Attach a single :class:`SensitiveFilter` to each named logger."""
    for name in logger_names:
        target = logging.getLogger(name)
        if not any(isinstance(flt, SensitiveFilter) for flt in target.filters):
            target.addFilter(SensitiveFilter())


__all__ = ["SensitiveFilter", "install_sensitive_filter", "scrub"]

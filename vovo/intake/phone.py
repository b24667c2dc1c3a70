"""US phone formatting for the contact form."""
import re

PHONE_RE = re.compile(r"\([0-9]{3}\) [0-9]{3}-[0-9]{4}")
_NON_DIGITS = re.compile(r"[^0-9]")


def format_phone(raw: str) -> str:
    """Re-render whatever was typed as `(XXX) XXX-XXXX`, partially if short.

    >>> format_phone("12345")
    '(123) 45'
    """
    digits = _NON_DIGITS.sub("", raw or "")[:10]
    if not digits:
        return ""
    if len(digits) <= 3:
        return f"({digits}"
    if len(digits) <= 6:
        return f"({digits[:3]}) {digits[3:]}"
    return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"


def is_valid_phone(value: str) -> bool:
    return bool(value) and PHONE_RE.fullmatch(value) is not None


def phone_digits(value: str) -> str:
    return _NON_DIGITS.sub("", value or "")

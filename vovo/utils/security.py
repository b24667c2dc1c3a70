"""Security helpers: PII masking for log lines and a plain secret comparison."""
import re

_PHONE_RE = re.compile(r"\(?\d{3}\)?[\s.-]?\d{3}[\s.-]?(\d{4})")


def mask_pii(text: str) -> str:
    # keep the last four digits so support can still match a call
    if not text:
        return text
    return _PHONE_RE.sub(lambda m: f"***-***-{m.group(1)}", text)


def secrets_match(given: str, expected: str) -> bool:
    """Plain equality check. The admin gate is a deterrent, not access control."""
    if given is None or expected is None:
        return False
    return given == expected

"""Input validation helpers for seller registration."""

import re

# 2 digits (state) + 10 chars (PAN) + entity digit + 'Z' + check char
GSTIN_PATTERN = re.compile(r"^[0-9]{2}[A-Z]{5}[0-9]{4}[A-Z][1-9A-Z]Z[0-9A-Z]$")
PAN_PATTERN = re.compile(r"^[A-Z]{5}[0-9]{4}[A-Z]$")
TIME_PATTERN = re.compile(r"^([01][0-9]|2[0-3]):[0-5][0-9]$")


def validate_gstin(gstin: str) -> bool:
    """
    Validates GSTIN format and state code (01-37).

    Example: 27AABCU9603R1ZM
    """
    if not gstin:
        return False

    gstin = gstin.strip().upper()
    if not GSTIN_PATTERN.match(gstin):
        return False

    state_code = int(gstin[:2])
    return 1 <= state_code <= 37


def validate_pan(pan: str) -> bool:
    return bool(pan) and bool(PAN_PATTERN.match(pan.strip().upper()))


def validate_clock_time(value: str) -> bool:
    """``HH:MM`` on a 24-hour clock."""
    return bool(TIME_PATTERN.match(value or ""))

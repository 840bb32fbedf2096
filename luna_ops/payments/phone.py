"""Kenyan mobile number normalization for mobile-money charges."""

import re

_ALREADY_NORMALIZED = re.compile(r"^254\d{9}$")
_LOCAL_ZERO = re.compile(r"^0\d{9}$")
_BARE_SUBSCRIBER = re.compile(r"^[71]\d{8}$")
_PLUS_PREFIXED = re.compile(r"^\+254\d{9}$")


def normalize_phone(phone: str) -> str:
    """Return the number in ``254XXXXXXXXX`` form.

    - 254 + 9 digits: unchanged
    - 0 + 9 digits: leading 0 becomes 254
    - 7 or 1 + 8 digits: prefixed with 254
    - +254 + 9 digits: the + is dropped
    - anything else: returned unchanged (the gateway rejects it)
    """
    if _ALREADY_NORMALIZED.match(phone):
        return phone
    if _LOCAL_ZERO.match(phone):
        return "254" + phone[1:]
    if _BARE_SUBSCRIBER.match(phone):
        return "254" + phone
    if _PLUS_PREFIXED.match(phone):
        return phone[1:]
    return phone

"""Semantic validators applied to raw detector matches.

A regex only constrains the shape of a match; these checks reject matches
whose content cannot be real.  The set of validators is closed and each
detector names at most one :class:`ValidatorKind`.

Example
-------
>>> luhn_check("4111111111111111")
True
>>> run_validator(ValidatorKind.IPV4_OCTETS, "999.999.999.999")
False
"""
from __future__ import annotations

import re
from enum import Enum

_NON_DIGIT = re.compile(r"\D")


class ValidatorKind(str, Enum):
    """Closed set of semantic validators a detector may use."""

    LUHN = "luhn"
    IPV4_OCTETS = "ipv4_octets"
    CALENDAR_DATE = "calendar_date"


def luhn_check(value: str) -> bool:
    """Return ``True`` when the digits of *value* pass the Luhn checksum.

    Non-digit characters are ignored.  Digit strings shorter than 13 or
    longer than 19 digits are rejected outright.
    """
    digits = _NON_DIGIT.sub("", value)
    if len(digits) < 13 or len(digits) > 19:
        return False
    total = 0
    alternate = False
    for ch in reversed(digits):
        n = int(ch)
        if alternate:
            n *= 2
            if n > 9:
                n -= 9
        total += n
        alternate = not alternate
    return total % 10 == 0


def ipv4_octets_valid(value: str) -> bool:
    """Return ``True`` when *value* is four dot-separated octets in 0-255."""
    octets = value.split(".")
    if len(octets) != 4:
        return False
    for octet in octets:
        if not octet.isdigit():
            return False
        if not 0 <= int(octet) <= 255:
            return False
    return True


def calendar_date_plausible(value: str) -> bool:
    """Return ``True`` for a ``YYYY-MM-DD`` value with plausible parts.

    Year must fall in 1900-2100, month in 1-12 and day in 1-31.  The day is
    not checked against the length of the given month.
    """
    parts = value.split("-")
    if len(parts) != 3 or not all(p.isdigit() for p in parts):
        return False
    year, month, day = (int(p) for p in parts)
    return 1900 <= year <= 2100 and 1 <= month <= 12 and 1 <= day <= 31


_VALIDATORS = {
    ValidatorKind.LUHN: luhn_check,
    ValidatorKind.IPV4_OCTETS: ipv4_octets_valid,
    ValidatorKind.CALENDAR_DATE: calendar_date_plausible,
}


def run_validator(kind: ValidatorKind | None, value: str) -> bool:
    """Apply the validator named by *kind*; ``None`` accepts every value."""
    if kind is None:
        return True
    return _VALIDATORS[kind](value)

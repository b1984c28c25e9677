"""CNPJ (Brazilian registry number) normalisation helpers."""

from __future__ import annotations

import re

CNPJ_DIGITS = 14
_NON_DIGITS = re.compile(r"\D")
_CANONICAL = re.compile(r"^\d{2}\.\d{3}\.\d{3}/\d{4}-\d{2}$")


def normalize(raw: object) -> str:
    """Strip every non-digit character from ``raw``."""

    if raw is None:
        return ""
    return _NON_DIGITS.sub("", str(raw))


def padded_digits(raw: object) -> str:
    """Digits of ``raw`` left-padded to 14, or an empty string when there are none."""

    digits = normalize(raw)
    return digits.rjust(CNPJ_DIGITS, "0") if digits else ""


def format_canonical(value: str) -> str:
    """Return ``value`` punctuated as ``XX.XXX.XXX/XXXX-XX``.

    Formatting is applied to the digits only, so both raw and already
    punctuated inputs are accepted. Short inputs are left-padded with zeros.
    """

    digits = normalize(value)
    if not digits or len(digits) > CNPJ_DIGITS:
        raise ValueError(f"Invalid CNPJ: {value!r}")
    digits = digits.rjust(CNPJ_DIGITS, "0")
    return f"{digits[0:2]}.{digits[2:5]}.{digits[5:8]}/{digits[8:12]}-{digits[12:14]}"


def is_canonical(value: str) -> bool:
    return bool(_CANONICAL.match(value or ""))


__all__ = ["CNPJ_DIGITS", "normalize", "padded_digits", "format_canonical", "is_canonical"]

# SPDX-License-Identifier: Apache-2.0

"""
CPF (Brazilian national ID) sanitizing and check-digit validation.
"""

import re

CPF_LENGTH = 11

_NON_DIGITS = re.compile(r"\D+")
_REPEATED_DIGIT = re.compile(r"^(\d)\1{10}$")


def sanitize_cpf(raw: str) -> str:
    """Remove formatting punctuation (dots, dashes, spaces) from a CPF."""
    if raw is None:
        return ""
    raw = str(raw)
    if raw.isdigit():
        return raw
    return _NON_DIGITS.sub("", raw)


def _check_digit(digits: list, length: int) -> int:
    """Weighted-sum-mod-11 check digit over the first ``length`` digits."""
    total = sum(digits[i] * (length + 1 - i) for i in range(length))
    result = (total * 10) % 11
    return 0 if result == 10 else result


def is_valid_cpf(raw: str) -> bool:
    """
    Validate a CPF using its two trailing check digits.

    Formatting characters are ignored. Sequences of a single repeated digit
    (``111.111.111-11``) have valid check digits but are rejected.

    Args:
        raw: CPF string, formatted or not

    Returns:
        True if both check digits match
    """
    if not raw or not isinstance(raw, str):
        return False

    cpf = _NON_DIGITS.sub("", raw)
    if len(cpf) != CPF_LENGTH or _REPEATED_DIGIT.match(cpf):
        return False

    digits = [int(d) for d in cpf]

    if _check_digit(digits, 9) != digits[9]:
        return False

    return _check_digit(digits, 10) == digits[10]

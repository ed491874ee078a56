"""Brazilian CPF helpers."""
import re

_NON_DIGITS = re.compile(r"\D")


def normalize_cpf(cpf: str | None) -> str:
    """Strip formatting (dots, dash, spaces) keeping only digits."""
    return _NON_DIGITS.sub("", cpf or "")


def _check_digit(digits: str) -> int:
    weight = len(digits) + 1
    total = sum(int(d) * (weight - i) for i, d in enumerate(digits))
    remainder = (total * 10) % 11
    return 0 if remainder == 10 else remainder


def is_valid_cpf(cpf: str | None) -> bool:
    """
    Validate a CPF using the two mod-11 check digits.

    Formatting is ignored. Sequences of one repeated digit pass the checksum
    but are never valid.
    """
    digits = normalize_cpf(cpf)
    if len(digits) != 11:
        return False
    if len(set(digits)) == 1:
        return False
    if _check_digit(digits[:9]) != int(digits[9]):
        return False
    return _check_digit(digits[:10]) == int(digits[10])


def mask_email(email: str) -> str:
    """Keep the first three characters of the local part: ``abc***@domain``."""
    parts = email.split("@")
    if len(parts) != 2:
        return email
    local, domain = parts
    return f"{local[:3]}***@{domain}"

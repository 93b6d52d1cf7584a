"""Brazilian taxpayer documents: CPF (people, 11 digits) and CNPJ (companies, 14 digits)."""
from __future__ import annotations

import re
from typing import Optional, Sequence

CPF = "cpf"
CNPJ = "cnpj"
DOCUMENT_TYPES = (CPF, CNPJ)

_NON_DIGITS = re.compile(r"\D")
_CNPJ_WEIGHTS_1 = (5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2)
_CNPJ_WEIGHTS_2 = (6, 5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2)


def only_digits(document: str) -> str:
    return _NON_DIGITS.sub("", document or "")


def detect_document_type(document: str) -> Optional[str]:
    digits = only_digits(document)
    if len(digits) == 11:
        return CPF
    if len(digits) == 14:
        return CNPJ
    return None


def _check_digit(digits: str, weights: Sequence[int]) -> int:
    total = sum(int(d) * w for d, w in zip(digits, weights))
    digit = 11 - total % 11
    return 0 if digit > 9 else digit


def validate_cpf(cpf: str) -> bool:
    digits = only_digits(cpf)
    # repeated digits pass the checksum but are never issued
    if len(digits) != 11 or len(set(digits)) == 1:
        return False
    first = _check_digit(digits[:9], range(10, 1, -1))
    second = _check_digit(digits[:10], range(11, 1, -1))
    return digits[9:] == f"{first}{second}"


def validate_cnpj(cnpj: str) -> bool:
    digits = only_digits(cnpj)
    if len(digits) != 14 or len(set(digits)) == 1:
        return False
    first = _check_digit(digits[:12], _CNPJ_WEIGHTS_1)
    second = _check_digit(digits[:13], _CNPJ_WEIGHTS_2)
    return digits[12:] == f"{first}{second}"


def validate_document(document: str, document_type: str) -> bool:
    return validate_cpf(document) if document_type == CPF else validate_cnpj(document)


def format_document(document: str, document_type: str) -> str:
    """``000.000.000-00`` for CPF, ``00.000.000/0000-00`` for CNPJ; other lengths are returned as digits."""
    digits = only_digits(document)
    if document_type == CPF and len(digits) == 11:
        return f"{digits[:3]}.{digits[3:6]}.{digits[6:9]}-{digits[9:]}"
    if document_type == CNPJ and len(digits) == 14:
        return f"{digits[:2]}.{digits[2:5]}.{digits[5:8]}/{digits[8:12]}-{digits[12:]}"
    return digits

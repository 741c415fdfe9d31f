"""Document validation utilities for brform.

The ``is_valid_*`` predicates are total and accept masked or bare input.
The ``validate_*`` helpers are meant for code outside forms: they return
the normalised digits and raise :class:`ValidationError` otherwise.
"""

import re
from typing import Optional

from .masks import DocumentKind, check_digits, is_structurally_valid, unmask

EMAIL_PATTERN = re.compile(
    r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
)


class ValidationError(ValueError):
    """Raised when validation fails."""

    pass


def is_valid_cpf(cpf: Optional[str]) -> bool:
    """Check a CPF (``000.000.000-00`` or 11 digits) with its check digits."""
    if cpf is None:
        return False
    digits = unmask(cpf)
    return len(digits) == 11 and check_digits(DocumentKind.CPF, digits)


def is_valid_cnpj(cnpj: Optional[str]) -> bool:
    """Check a CNPJ (``00.000.000/0000-00`` or 14 digits) with its check digits."""
    if cnpj is None:
        return False
    digits = unmask(cnpj)
    return len(digits) == 14 and check_digits(DocumentKind.CNPJ, digits)


def is_valid_cpf_cnpj(document: Optional[str]) -> bool:
    """Check a document that may be either a CPF or a CNPJ."""
    digits = unmask(document)
    if len(digits) == 11:
        return is_valid_cpf(digits)
    if len(digits) == 14:
        return is_valid_cnpj(digits)
    return False


def is_valid_email(email: Optional[str]) -> bool:
    return bool(email and email.strip() and EMAIL_PATTERN.match(email.strip()))


def _validate_document(value: str, kind: DocumentKind, name: str) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{name} must be a string")

    digits = unmask(value)
    if not digits:
        raise ValidationError(f"{name} cannot be empty")

    if not is_structurally_valid(kind, digits):
        raise ValidationError(f"{name} is incomplete, got {len(digits)} digits")

    if not check_digits(kind, digits):
        raise ValidationError(f"Invalid {name}: check digits do not match")

    return digits


def validate_cpf(cpf: str) -> str:
    """Validate a CPF.

    Args:
        cpf: CPF with or without mask

    Returns:
        The 11 CPF digits

    Raises:
        ValidationError: If the CPF is empty, incomplete or fails the check digits
    """
    return _validate_document(cpf, DocumentKind.CPF, "CPF")


def validate_cnpj(cnpj: str) -> str:
    """Validate a CNPJ.

    Args:
        cnpj: CNPJ with or without mask

    Returns:
        The 14 CNPJ digits

    Raises:
        ValidationError: If the CNPJ is empty, incomplete or fails the check digits
    """
    return _validate_document(cnpj, DocumentKind.CNPJ, "CNPJ")


def validate_cep(cep: str) -> str:
    """Validate a CEP (postal code) and return its 8 digits."""
    return _validate_document(cep, DocumentKind.CEP, "CEP")


def validate_phone(phone: str, mobile: Optional[bool] = None) -> str:
    """Validate a phone number.

    Args:
        phone: Phone with or without mask
        mobile: ``True`` requires 11 digits, ``False`` requires 10,
            ``None`` accepts either

    Returns:
        The phone digits

    Raises:
        ValidationError: If the phone is empty or has the wrong length
    """
    if mobile is None:
        kind = DocumentKind.PHONE_MOBILE if len(unmask(phone or "")) == 11 else DocumentKind.PHONE_FIXED
    else:
        kind = DocumentKind.PHONE_MOBILE if mobile else DocumentKind.PHONE_FIXED
    return _validate_document(phone, kind, "Phone")


def validate_email(email: str) -> str:
    """Validate an e-mail address and return it stripped.

    Raises:
        ValidationError: If the address is empty or malformed
    """
    if not isinstance(email, str):
        raise ValidationError("E-mail must be a string")

    if not email.strip():
        raise ValidationError("E-mail cannot be empty")

    if not is_valid_email(email):
        raise ValidationError(f"Invalid e-mail address: {email}")

    return email.strip()

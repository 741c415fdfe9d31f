"""Shared utilities package."""

from .dates import format_date, parse_date, parse_date_flexible
from .masks import (
    DocumentKind,
    DocumentValue,
    EditOperation,
    check_digits,
    format_currency,
    format_digits,
    has_check_digits,
    is_structurally_valid,
    max_digits,
    parse_currency,
    remask,
    remask_text,
    unmask,
)
from .validators import (
    ValidationError,
    is_valid_cnpj,
    is_valid_cpf,
    is_valid_cpf_cnpj,
    is_valid_email,
    validate_cep,
    validate_cnpj,
    validate_cpf,
    validate_email,
    validate_phone,
)

__all__ = [
    'DocumentKind',
    'DocumentValue',
    'EditOperation',
    'ValidationError',
    'check_digits',
    'format_currency',
    'format_date',
    'format_digits',
    'has_check_digits',
    'is_structurally_valid',
    'is_valid_cnpj',
    'is_valid_cpf',
    'is_valid_cpf_cnpj',
    'is_valid_email',
    'max_digits',
    'parse_currency',
    'parse_date',
    'parse_date_flexible',
    'remask',
    'remask_text',
    'unmask',
    'validate_cep',
    'validate_cnpj',
    'validate_cpf',
    'validate_email',
    'validate_phone',
]

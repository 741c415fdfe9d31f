"""Masked Brazilian form fields and form-wide validation."""

from brform.shared import (
    DocumentKind,
    DocumentValue,
    EditOperation,
    ValidationError,
    is_valid_cnpj,
    is_valid_cpf,
    parse_date,
    remask,
    remask_text,
    unmask,
)
from brform.validation import AggregateResult, Validatable, ValidationResult, validate_all

__version__ = "1.0.0"

__all__ = [
    "AggregateResult",
    "DocumentKind",
    "DocumentValue",
    "EditOperation",
    "Validatable",
    "ValidationError",
    "ValidationResult",
    "is_valid_cnpj",
    "is_valid_cpf",
    "parse_date",
    "remask",
    "remask_text",
    "unmask",
    "validate_all",
]

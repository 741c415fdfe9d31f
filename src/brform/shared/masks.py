"""Mask engine for Brazilian documents, phones, dates and currency.

Every function here is pure: the same input always renders the same
output and nothing raises on malformed text. Widgets call :func:`remask`
(or :func:`remask_text`) on every edit and replace their whole buffer
with the result.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Dict, Optional

from brform.constants import (
    CNPJ_WEIGHTS_FIRST,
    CNPJ_WEIGHTS_SECOND,
    CPF_WEIGHTS_FIRST,
    CPF_WEIGHTS_SECOND,
    DEFAULT_CURRENCY_PREFIX,
    MAX_CURRENCY_DIGITS,
)

_NON_DIGITS = re.compile(r"[^0-9]+")
_CENTS = Decimal("0.01")


class DocumentKind(str, Enum):
    """Kinds of masked values understood by the engine."""

    CPF = "cpf"
    CNPJ = "cnpj"
    CPF_CNPJ = "cpf_cnpj"
    CEP = "cep"
    PHONE_FIXED = "phone_fixed"
    PHONE_MOBILE = "phone_mobile"
    CURRENCY = "currency"
    DATE = "date"
    GENERIC = "generic"


_MAX_DIGITS: Dict[DocumentKind, Optional[int]] = {
    DocumentKind.CPF: 11,
    DocumentKind.CNPJ: 14,
    DocumentKind.CPF_CNPJ: 14,
    DocumentKind.CEP: 8,
    DocumentKind.PHONE_FIXED: 10,
    DocumentKind.PHONE_MOBILE: 11,
    DocumentKind.CURRENCY: MAX_CURRENCY_DIGITS,
    DocumentKind.DATE: 8,
    DocumentKind.GENERIC: None,
}

# Separator inserted right before the digit at the given index
_CPF_LAYOUT = {3: ".", 6: ".", 9: "-"}
_CNPJ_LAYOUT = {2: ".", 5: ".", 8: "/", 12: "-"}
_LAYOUTS: Dict[DocumentKind, Dict[int, str]] = {
    DocumentKind.CPF: _CPF_LAYOUT,
    DocumentKind.CNPJ: _CNPJ_LAYOUT,
    DocumentKind.CEP: {5: "-"},
    DocumentKind.PHONE_FIXED: {0: "(", 2: ") ", 6: "-"},
    DocumentKind.PHONE_MOBILE: {0: "(", 2: ") ", 7: "-"},
    DocumentKind.DATE: {2: "/", 4: "/"},
    DocumentKind.GENERIC: {},
}


@dataclass(frozen=True)
class EditOperation:
    """A raw edit on a text buffer: delete ``deleted_length`` chars at
    ``position`` and insert ``inserted_text`` there."""

    position: int
    deleted_length: int = 0
    inserted_text: str = ""

    @classmethod
    def insert(cls, position: int, text: str) -> "EditOperation":
        return cls(position, 0, text)

    @classmethod
    def delete(cls, position: int, length: int = 1) -> "EditOperation":
        return cls(position, length, "")

    @classmethod
    def replace_all(cls, text: str) -> "EditOperation":
        """Edit that swaps any buffer for ``text``."""
        return cls(0, -1, text)

    def apply(self, text: str) -> str:
        """Splice this edit into ``text``, clamping positions into range."""
        size = len(text)
        start = min(max(self.position, 0), size)
        if self.deleted_length < 0:
            end = size
        else:
            end = min(start + self.deleted_length, size)
        return text[:start] + (self.inserted_text or "") + text[end:]


def _is_ascii_digits(text: str) -> bool:
    return text.isascii() and text.isdigit()


def unmask(text: Optional[str]) -> str:
    """Return only the digit characters of ``text``."""
    return _NON_DIGITS.sub("", text or "")


def max_digits(kind: DocumentKind) -> Optional[int]:
    """Digit cap for ``kind`` (``None`` means unlimited)."""
    return _MAX_DIGITS[kind]


def truncate_digits(kind: DocumentKind, digits: str) -> str:
    limit = _MAX_DIGITS[kind]
    return digits if limit is None else digits[:limit]


def _layout_for(kind: DocumentKind, digits: str) -> Dict[int, str]:
    if kind is DocumentKind.CPF_CNPJ:
        # More than 11 digits can only be a CNPJ
        return _CNPJ_LAYOUT if len(digits) > 11 else _CPF_LAYOUT
    return _LAYOUTS[kind]


def currency_from_digits(digits: str) -> Decimal:
    """Interpret a digit buffer as integer cents."""
    cents = int(digits) if digits else 0
    return (Decimal(cents) / 100).quantize(_CENTS, rounding=ROUND_HALF_UP)


def format_currency(value: Decimal, prefix: str = DEFAULT_CURRENCY_PREFIX) -> str:
    """Render ``value`` as ``R$ 1.234,56``."""
    amount = Decimal(value).quantize(_CENTS, rounding=ROUND_HALF_UP)
    grouped = f"{amount:,.2f}"
    # Swap the separators to the Brazilian convention
    grouped = grouped.replace(",", "X").replace(".", ",").replace("X", ".")
    return f"{prefix}{grouped}"


def parse_currency(text: Optional[str], prefix: str = DEFAULT_CURRENCY_PREFIX) -> Decimal:
    """Read a value rendered by :func:`format_currency` back.

    Returns ``Decimal("0.00")`` for empty or unreadable text.
    """
    cleaned = (text or "").replace(prefix.strip(), "").replace(" ", "")
    cleaned = cleaned.replace(".", "").replace(",", ".")
    if not cleaned:
        return Decimal("0.00")
    try:
        return Decimal(cleaned).quantize(_CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return Decimal("0.00")


def format_digits(
    kind: DocumentKind, digits: str, *, prefix: str = DEFAULT_CURRENCY_PREFIX
) -> str:
    """Build the canonical masked string for an already-stripped buffer."""
    digits = truncate_digits(kind, unmask(digits))

    if kind is DocumentKind.CURRENCY:
        return format_currency(currency_from_digits(digits), prefix)

    layout = _layout_for(kind, digits)
    parts = []
    for index, char in enumerate(digits):
        separator = layout.get(index)
        if separator:
            parts.append(separator)
        parts.append(char)
    return "".join(parts)


def remask(
    kind: DocumentKind,
    previous_text: str,
    edit: EditOperation,
    *,
    prefix: str = DEFAULT_CURRENCY_PREFIX,
) -> str:
    """Apply ``edit`` to ``previous_text`` and return the new full buffer.

    The edit is spliced in, the result is stripped to digits, truncated to
    the kind's cap and laid out again. Deletions go through the same path.
    """
    candidate = edit.apply(previous_text or "")
    return format_digits(kind, unmask(candidate), prefix=prefix)


def remask_text(
    kind: DocumentKind, text: Optional[str], *, prefix: str = DEFAULT_CURRENCY_PREFIX
) -> str:
    """Re-mask a whole new buffer (the "new full text" form of an edit)."""
    return format_digits(kind, unmask(text), prefix=prefix)


def _is_real_date(digits: str) -> bool:
    try:
        date(int(digits[4:8]), int(digits[2:4]), int(digits[0:2]))
    except ValueError:
        return False
    return True


def is_structurally_valid(kind: DocumentKind, digits: str) -> bool:
    """Check that ``digits`` has the complete shape for ``kind``.

    Only judges completeness; the empty buffer is never valid here.
    """
    digits = digits or ""
    if not digits or not _is_ascii_digits(digits):
        return False

    size = len(digits)
    if kind is DocumentKind.CPF_CNPJ:
        return size in (11, 14)
    if kind is DocumentKind.CURRENCY:
        return size <= MAX_CURRENCY_DIGITS
    if kind is DocumentKind.GENERIC:
        return True
    if size != _MAX_DIGITS[kind]:
        return False
    if kind is DocumentKind.DATE:
        return _is_real_date(digits)
    return True


def has_check_digits(kind: DocumentKind) -> bool:
    return kind in (DocumentKind.CPF, DocumentKind.CNPJ, DocumentKind.CPF_CNPJ)


def _check_digit(digits: str, weights) -> int:
    total = sum(int(d) * w for d, w in zip(digits, weights))
    remainder = total % 11
    return 0 if remainder < 2 else 11 - remainder


def _cpf_check(digits: str) -> bool:
    if len(digits) != 11 or not _is_ascii_digits(digits):
        return False
    if digits == digits[0] * 11:
        return False
    if _check_digit(digits[:9], CPF_WEIGHTS_FIRST) != int(digits[9]):
        return False
    return _check_digit(digits[:10], CPF_WEIGHTS_SECOND) == int(digits[10])


def _cnpj_check(digits: str) -> bool:
    if len(digits) != 14 or not _is_ascii_digits(digits):
        return False
    if digits == digits[0] * 14:
        return False
    if _check_digit(digits[:12], CNPJ_WEIGHTS_FIRST) != int(digits[12]):
        return False
    return _check_digit(digits[:13], CNPJ_WEIGHTS_SECOND) == int(digits[13])


def check_digits(kind: DocumentKind, digits: str) -> bool:
    """Run the modulo-11 check digit test for CPF/CNPJ buffers.

    Kinds without check digits always pass.
    """
    digits = digits or ""
    if kind is DocumentKind.CPF:
        return _cpf_check(digits)
    if kind is DocumentKind.CNPJ:
        return _cnpj_check(digits)
    if kind is DocumentKind.CPF_CNPJ:
        return _cnpj_check(digits) if len(digits) > 11 else _cpf_check(digits)
    return True


@dataclass(frozen=True)
class DocumentValue:
    """Digits typed so far plus their masked rendering."""

    raw_digits: str
    masked: str
    kind: DocumentKind

    @classmethod
    def from_digits(
        cls, kind: DocumentKind, digits: str, *, prefix: str = DEFAULT_CURRENCY_PREFIX
    ) -> "DocumentValue":
        raw = truncate_digits(kind, unmask(digits))
        return cls(raw_digits=raw, masked=format_digits(kind, raw, prefix=prefix), kind=kind)

    @classmethod
    def from_text(
        cls, kind: DocumentKind, text: Optional[str], *, prefix: str = DEFAULT_CURRENCY_PREFIX
    ) -> "DocumentValue":
        return cls.from_digits(kind, unmask(text), prefix=prefix)

    @property
    def is_empty(self) -> bool:
        return not self.raw_digits

    @property
    def is_complete(self) -> bool:
        return is_structurally_valid(self.kind, self.raw_digits)

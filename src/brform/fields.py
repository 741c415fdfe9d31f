"""Toolkit-independent form field models.

A model owns the state of one field (its text, whether it is required
and the message of the last validation) and implements the validity
protocol. Widgets in :mod:`brform.widgets` forward every edit and every
protocol call to a model, so all validation rules can be exercised
without a display.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple, Union

from brform.constants import (
    DEFAULT_CURRENCY_PREFIX,
    DEFAULT_MAX_TEXT_LENGTH,
    MAX_CURRENCY_DIGITS,
)
from brform.i18n import _
from brform.shared.dates import format_date, parse_date, parse_date_flexible
from brform.shared.masks import (
    DocumentKind,
    DocumentValue,
    EditOperation,
    check_digits,
    format_currency,
    format_digits,
    is_structurally_valid,
    parse_currency,
    remask_text,
    unmask,
)
from brform.shared.validators import is_valid_email
from brform.validation import Validatable, ValidationResult

logger = logging.getLogger(__name__)


class Gender(str, Enum):
    """Grammatical gender of a field label, picks the message variant."""

    MASCULINE = "masculine"
    FEMININE = "feminine"


class FieldStatus(str, Enum):
    EMPTY = "empty"
    PARTIALLY_FILLED = "partially_filled"
    COMPLETE_VALID = "complete_valid"
    COMPLETE_INVALID = "complete_invalid"


@dataclass
class FieldState:
    """Mutable per-field state. Only the owning model writes to it."""

    required: bool = False
    value: Optional[DocumentValue] = None
    last_error_message: Optional[str] = None
    error_shown: bool = False
    validated: bool = False


class FieldModel(Validatable):
    """Base model: a labelled text buffer with a required flag."""

    default_gender = Gender.MASCULINE

    def __init__(
        self,
        label: str = "Campo",
        *,
        required: bool = False,
        gender: Optional[Gender] = None,
    ) -> None:
        self.label = label
        self.gender = gender or self.default_gender
        self._state = FieldState(required=required)
        self._text = ""
        self.set_text("")

    # -- state -------------------------------------------------------------

    @property
    def required(self) -> bool:
        return self._state.required

    @required.setter
    def required(self, value: bool) -> None:
        self._state.required = bool(value)

    @property
    def state(self) -> FieldState:
        """Copy of the current state."""
        return replace(self._state)

    @property
    def text(self) -> str:
        return self._text

    def normalize(self, text: str) -> str:
        """Canonical display form of ``text``; masked fields override this."""
        return text

    def set_text(self, text: Optional[str]) -> str:
        """Replace the whole buffer and return what should be displayed."""
        self._text = self.normalize(text or "")
        self._on_text_changed()
        return self._text

    def apply_edit(self, edit: EditOperation) -> str:
        return self.set_text(edit.apply(self._text))

    def clear(self) -> None:
        self.set_text("")
        self._state.last_error_message = None
        self._state.validated = False
        self.clear_error()

    def is_empty(self) -> bool:
        return not self._text.strip()

    def _on_text_changed(self) -> None:
        pass

    # -- messages ------------------------------------------------------------

    def _message(self, key: str, **kwargs) -> str:
        return _(key, label=self.label, **kwargs)

    def _gendered(self, key: str) -> str:
        return self._message(f"{key}.{self.gender.value}")

    # -- validity protocol ------------------------------------------------------

    def check(self) -> Optional[str]:
        """Return the error message for the current text, or ``None``."""
        if self.required and self.is_empty():
            return self._gendered("required")
        return None

    def validate(self) -> bool:
        message = self.check()
        self._state.last_error_message = message
        self._state.validated = True
        if message is not None:
            logger.debug("Field '%s' invalid: %s", self.label, message)
        return message is None

    def last_error_message(self) -> Optional[str]:
        return self._state.last_error_message

    def validation_result(self) -> ValidationResult:
        if not self._state.validated:
            return ValidationResult(valid=None)
        return super().validation_result()

    def show_error(self) -> None:
        self._state.error_shown = True

    def clear_error(self) -> None:
        self._state.error_shown = False

    def is_error_shown(self) -> bool:
        return self._state.error_shown


class TextFieldModel(FieldModel):
    def __init__(
        self,
        label: str = "Texto",
        *,
        required: bool = False,
        gender: Optional[Gender] = None,
        min_length: int = 0,
        max_length: int = DEFAULT_MAX_TEXT_LENGTH,
    ) -> None:
        super().__init__(label, required=required, gender=gender)
        self.min_length = min_length
        self.max_length = max_length

    @property
    def value(self) -> str:
        return self._text.strip()

    def check(self) -> Optional[str]:
        message = super().check()
        if message is not None:
            return message

        value = self.value
        if value and len(value) < self.min_length:
            return self._message("min_length", count=self.min_length)
        if len(value) > self.max_length:
            return self._message("max_length", count=self.max_length)
        return None


class PasswordFieldModel(FieldModel):
    default_gender = Gender.FEMININE

    def __init__(
        self,
        label: str = "Senha",
        *,
        required: bool = False,
        gender: Optional[Gender] = None,
        min_length: int = 0,
    ) -> None:
        super().__init__(label, required=required, gender=gender)
        self.min_length = min_length

    def is_empty(self) -> bool:
        # Whitespace is a legal password
        return not self._text

    def check(self) -> Optional[str]:
        message = super().check()
        if message is not None:
            return message
        if self.min_length > 0 and len(self._text) < self.min_length:
            return self._message("min_length", count=self.min_length)
        return None


class EmailFieldModel(FieldModel):
    def __init__(self, label: str = "E-mail", **kwargs) -> None:
        super().__init__(label, **kwargs)

    @property
    def value(self) -> str:
        return self._text.strip()

    def check(self) -> Optional[str]:
        message = super().check()
        if message is not None:
            return message
        if self.value and not is_valid_email(self.value):
            return self._message("invalid_format")
        return None


_DEFAULT_LABELS = {
    DocumentKind.CPF: "CPF",
    DocumentKind.CNPJ: "CNPJ",
    DocumentKind.CPF_CNPJ: "CPF/CNPJ",
    DocumentKind.CEP: "CEP",
    DocumentKind.PHONE_FIXED: "Telefone",
    DocumentKind.PHONE_MOBILE: "Celular",
    DocumentKind.GENERIC: "Documento",
}


class DocumentFieldModel(FieldModel):
    """Digit-masked field (CPF, CNPJ, CPF/CNPJ, CEP, phones).

    Validation runs required, then completeness, then check digits, so a
    short CPF always reads "está incompleto" and never "inválido".
    """

    def __init__(
        self,
        kind: DocumentKind,
        label: Optional[str] = None,
        *,
        required: bool = False,
        gender: Optional[Gender] = None,
        check_digits: bool = True,
    ) -> None:
        if kind not in _DEFAULT_LABELS:
            raise ValueError(
                f"{kind.value} is not a digit document; use CurrencyFieldModel or DateFieldModel"
            )
        self.kind = kind
        self.check_digits = check_digits
        super().__init__(label or _DEFAULT_LABELS[kind], required=required, gender=gender)

    def normalize(self, text: str) -> str:
        return remask_text(self.kind, text)

    def _on_text_changed(self) -> None:
        self._state.value = DocumentValue.from_text(self.kind, self._text)

    @property
    def value(self) -> DocumentValue:
        return DocumentValue.from_text(self.kind, self._text)

    def unmasked_value(self) -> str:
        return unmask(self._text)

    def set_value(self, value: Optional[str]) -> str:
        return self.set_text(format_digits(self.kind, unmask(value)))

    def is_empty(self) -> bool:
        return not self.unmasked_value()

    def is_cnpj(self) -> bool:
        return self.kind is DocumentKind.CNPJ or (
            self.kind is DocumentKind.CPF_CNPJ and len(self.unmasked_value()) > 11
        )

    def is_cpf(self) -> bool:
        digits = self.unmasked_value()
        if self.kind is DocumentKind.CPF:
            return True
        return self.kind is DocumentKind.CPF_CNPJ and 0 < len(digits) <= 11

    @property
    def status(self) -> FieldStatus:
        digits = self.unmasked_value()
        if not digits:
            return FieldStatus.EMPTY
        if not is_structurally_valid(self.kind, digits):
            return FieldStatus.PARTIALLY_FILLED
        if self.check_digits and not check_digits(self.kind, digits):
            return FieldStatus.COMPLETE_INVALID
        return FieldStatus.COMPLETE_VALID

    def check(self) -> Optional[str]:
        digits = self.unmasked_value()
        if not digits:
            return self._gendered("required") if self.required else None
        if not is_structurally_valid(self.kind, digits):
            return self._gendered("incomplete")
        if self.check_digits and not check_digits(self.kind, digits):
            return self._gendered("invalid")
        return None


_MAX_CENTS = 10 ** MAX_CURRENCY_DIGITS - 1
_CENTS_CAP_AMOUNT = Decimal(10) ** (MAX_CURRENCY_DIGITS - 2)


def _to_cents(value) -> Optional[int]:
    if value is None:
        return 0
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        return None
    if not amount.is_finite() or amount < 0 or amount >= _CENTS_CAP_AMOUNT:
        return None
    cents = int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    return cents if cents <= _MAX_CENTS else None


class CurrencyFieldModel(FieldModel):
    """Money field; the buffer always shows an amount, zero when empty."""

    def __init__(
        self,
        label: str = "Valor",
        *,
        required: bool = False,
        gender: Optional[Gender] = None,
        minimum: Optional[Union[Decimal, float, str]] = None,
        maximum: Optional[Union[Decimal, float, str]] = None,
        prefix: str = DEFAULT_CURRENCY_PREFIX,
    ) -> None:
        self.prefix = prefix
        super().__init__(label, required=required, gender=gender)
        self.minimum = None
        self.maximum = None
        self.set_range(minimum, maximum)

    def set_range(self, minimum=None, maximum=None) -> None:
        self.minimum = Decimal(str(minimum)) if minimum is not None else None
        self.maximum = Decimal(str(maximum)) if maximum is not None else None

    def normalize(self, text: str) -> str:
        return remask_text(DocumentKind.CURRENCY, text, prefix=self.prefix)

    @property
    def value(self) -> Decimal:
        return parse_currency(self._text, self.prefix)

    def set_value(self, value: Optional[Union[Decimal, float, int, str]]) -> str:
        """Show ``value`` rounded half-up to cents.

        Amounts the field cannot hold (unreadable, negative or wider than
        the digit cap) are refused: the buffer keeps its current amount
        and a warning is logged.
        """
        cents = _to_cents(value)
        if cents is None:
            logger.warning("Field '%s' refused amount %r", self.label, value)
            return self._text
        return self.set_text(format_digits(DocumentKind.CURRENCY, str(cents), prefix=self.prefix))

    def set_prefix(self, prefix: str) -> None:
        amount = self.value
        self.prefix = prefix
        self.set_value(amount)

    def is_empty(self) -> bool:
        return self.value == 0

    def check(self) -> Optional[str]:
        message = super().check()
        if message is not None:
            return message

        value = self.value
        if self.minimum is not None and value < self.minimum:
            return self._message("min_value", value=format_currency(self.minimum, self.prefix))
        if self.maximum is not None and value > self.maximum:
            return self._message("max_value", value=format_currency(self.maximum, self.prefix))
        return None


class DateFieldModel(FieldModel):
    """Date field.

    The strict variant masks input as ``dd/mm/aaaa``. The flexible variant
    (date picker) keeps free text and resolves it on :meth:`commit`,
    accepting ``-``/``.`` separators and two-digit years.
    """

    default_gender = Gender.FEMININE

    def __init__(
        self,
        label: str = "Data",
        *,
        required: bool = False,
        gender: Optional[Gender] = None,
        flexible: bool = False,
        not_before: Optional["DateFieldModel"] = None,
    ) -> None:
        self.flexible = flexible
        self.not_before = not_before
        super().__init__(label, required=required, gender=gender)

    def normalize(self, text: str) -> str:
        if self.flexible:
            return text
        return remask_text(DocumentKind.DATE, text)

    @property
    def value(self) -> Optional[date]:
        if self.flexible:
            return parse_date_flexible(self._text)
        return parse_date(self._text)

    def set_value(self, value: Optional[date]) -> str:
        return self.set_text(format_date(value))

    def commit(self) -> str:
        """Rewrite the buffer in canonical form when it holds a date."""
        parsed = self.value
        if parsed is not None:
            return self.set_text(format_date(parsed))
        return self._text

    def check(self) -> Optional[str]:
        if self.is_empty():
            return self._gendered("required") if self.required else None
        if not self.flexible and len(unmask(self._text)) < 8:
            return self._gendered("incomplete")
        value = self.value
        if value is None:
            return self._message("invalid_date")
        earliest = self.not_before.value if self.not_before is not None else None
        if earliest is not None and value < earliest:
            return self._message("date_order", other=self.not_before.label)
        return None


class PeriodFieldModel(Validatable):
    """Start and end date pickers validated as one field.

    Both dates inherit the period's required flag and the end date may
    not come before the start date. The two date models are also exposed
    through :meth:`children`, so form-wide validation reaches them too.
    """

    def __init__(
        self,
        label: str = "Período",
        *,
        required: bool = False,
        start_label: str = "Data inicial",
        end_label: str = "Data final",
    ) -> None:
        self.label = label
        self.start = DateFieldModel(start_label, required=required, flexible=True)
        self.end = DateFieldModel(end_label, required=required, flexible=True, not_before=self.start)
        self._last_error_message: Optional[str] = None
        self._validated = False

    def children(self):
        return (self.start, self.end)

    @property
    def required(self) -> bool:
        return self.start.required

    @required.setter
    def required(self, value: bool) -> None:
        self.start.required = value
        self.end.required = value

    @property
    def value(self) -> Tuple[Optional[date], Optional[date]]:
        return self.start.value, self.end.value

    def set_period(self, start: Optional[date], end: Optional[date]) -> None:
        self.start.set_value(start)
        self.end.set_value(end)

    def clear(self) -> None:
        for child in self.children():
            child.clear()
        self._last_error_message = None
        self._validated = False

    def validate(self) -> bool:
        # Both dates run so each one records its own message
        results = [child.validate() for child in self.children()]
        self._validated = True
        self._last_error_message = next(
            (child.last_error_message() for child in self.children() if child.last_error_message()),
            None,
        )
        return all(results)

    def last_error_message(self) -> Optional[str]:
        return self._last_error_message

    def validation_result(self) -> ValidationResult:
        if not self._validated:
            return ValidationResult(valid=None)
        return super().validation_result()

    def show_error(self) -> None:
        for child in self.children():
            if child.last_error_message():
                child.show_error()

    def clear_error(self) -> None:
        for child in self.children():
            child.clear_error()

    def is_error_shown(self) -> bool:
        return any(child.is_error_shown() for child in self.children())


class FileFieldModel(FieldModel):
    """Path chosen through a file (or folder) picker; only presence is checked."""

    def __init__(
        self,
        label: Optional[str] = None,
        *,
        required: bool = False,
        gender: Optional[Gender] = None,
        directory: bool = False,
    ) -> None:
        self.directory = directory
        if gender is None and label is None and directory:
            gender = Gender.FEMININE
        super().__init__(label or ("Pasta" if directory else "Arquivo"), required=required, gender=gender)

    @property
    def path(self) -> Optional[Path]:
        text = self._text.strip()
        return Path(text) if text else None

    def set_path(self, path: Optional[Union[str, Path]]) -> str:
        return self.set_text(str(path) if path else "")


class ImageFieldModel(FileFieldModel):
    default_gender = Gender.FEMININE

    def __init__(self, label: str = "Imagem", *, required: bool = False, gender: Optional[Gender] = None) -> None:
        super().__init__(label, required=required, gender=gender)

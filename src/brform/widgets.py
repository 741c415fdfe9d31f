"""PySide6 form field widgets backed by :mod:`brform.fields` models."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Optional, Tuple, Union

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from brform.constants import DEFAULT_CURRENCY_PREFIX, ERROR_COLOR
from brform.fields import (
    CurrencyFieldModel,
    DateFieldModel,
    DocumentFieldModel,
    EmailFieldModel,
    FieldModel,
    FileFieldModel,
    FieldStatus,
    Gender,
    ImageFieldModel,
    PasswordFieldModel,
    PeriodFieldModel,
    TextFieldModel,
)
from brform.i18n import _
from brform.shared.masks import DocumentKind, DocumentValue
from brform.validation import Validatable, ValidationResult

logger = logging.getLogger(__name__)

REQUIRED_MARK = " *"


class FormField(QWidget, Validatable):
    """Label, inline error message and a line edit bound to a field model.

    Every user edit is pushed through the model and the editor is refilled
    with the model's canonical text in one replace.
    """

    def __init__(self, model: FieldModel, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.model = model
        self._build_ui()
        self._refresh_label()
        self.editor.setText(self.model.text)

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(2)

        top = QHBoxLayout()
        self.label = QLabel()
        self.error_label = QLabel()
        self.error_label.setStyleSheet(f"color: {ERROR_COLOR}; font-size: 11px;")
        self.error_label.hide()
        top.addWidget(self.label)
        top.addWidget(self.error_label, 1)
        layout.addLayout(top)

        self.editor = self._create_editor()
        self.editor.textEdited.connect(self._on_text_edited)
        self.editor.editingFinished.connect(self._on_editing_finished)
        self.label.setBuddy(self.editor)
        self.editor_row = QHBoxLayout()
        self.editor_row.addWidget(self.editor, 1)
        layout.addLayout(self.editor_row)

        self.setLayout(layout)

    def _create_editor(self) -> QLineEdit:
        return QLineEdit()

    def _refresh_label(self) -> None:
        text = self.model.label + (REQUIRED_MARK if self.model.required else "")
        self.label.setText(text)

    # -- editing -------------------------------------------------------------

    def _on_text_edited(self, text: str) -> None:
        cursor = self.editor.cursorPosition()
        canonical = self.model.set_text(text)
        if canonical != text:
            self.editor.setText(canonical)
            self.editor.setCursorPosition(self._cursor_after_edit(text, cursor, canonical))

    def _cursor_after_edit(self, edited: str, cursor: int, canonical: str) -> int:
        """Keep the cursor after the same number of digits it followed."""
        digits_before = sum(1 for char in edited[:cursor] if char.isdigit())
        if digits_before == 0:
            return 0
        seen = 0
        for index, char in enumerate(canonical):
            if char.isdigit():
                seen += 1
                if seen == digits_before:
                    return index + 1
        return len(canonical)

    def _on_editing_finished(self) -> None:
        self._sync_from_editor()

    def _sync_from_editor(self) -> None:
        # setText() from code does not emit textEdited
        if self.editor.text() != self.model.text:
            self.editor.setText(self.model.set_text(self.editor.text()))

    # -- public API ------------------------------------------------------------

    @property
    def label_text(self) -> str:
        return self.model.label

    def set_label_text(self, label: str) -> None:
        self.model.label = label
        self._refresh_label()

    def is_required(self) -> bool:
        return self.model.required

    def set_required(self, required: bool) -> None:
        self.model.required = required
        self._refresh_label()

    def text(self) -> str:
        self._sync_from_editor()
        return self.model.text

    def set_text(self, text: Optional[str]) -> None:
        self.editor.setText(self.model.set_text(text))

    def clear(self) -> None:
        self.model.clear()
        self.editor.setText(self.model.text)
        self.clear_error()

    def focus_editor(self) -> None:
        self.editor.setFocus(Qt.FocusReason.OtherFocusReason)
        self.editor.selectAll()

    # -- validity protocol -------------------------------------------------------

    def validate(self) -> bool:
        self._sync_from_editor()
        return self.model.validate()

    def last_error_message(self) -> Optional[str]:
        return self.model.last_error_message()

    def validation_result(self) -> ValidationResult:
        return self.model.validation_result()

    def show_error(self) -> None:
        self.model.show_error()
        message = self.model.last_error_message()
        self.editor.setStyleSheet(f"border: 1px solid {ERROR_COLOR};")
        if message:
            self.error_label.setText(f" - {message}")
            self.error_label.show()
            self.setToolTip(message)

    def clear_error(self) -> None:
        self.model.clear_error()
        self.editor.setStyleSheet("")
        self.error_label.setText("")
        self.error_label.hide()
        self.setToolTip("")

    def is_error_shown(self) -> bool:
        return self.model.is_error_shown()


class TextField(FormField):
    def __init__(
        self,
        label: str = "Texto",
        *,
        required: bool = False,
        gender: Optional[Gender] = None,
        min_length: int = 0,
        max_length: Optional[int] = None,
        placeholder: str = "",
        parent: Optional[QWidget] = None,
    ) -> None:
        kwargs = {"max_length": max_length} if max_length is not None else {}
        model = TextFieldModel(label, required=required, gender=gender, min_length=min_length, **kwargs)
        super().__init__(model, parent)
        if placeholder:
            self.editor.setPlaceholderText(placeholder)

    @property
    def value(self) -> str:
        return self.text().strip()


class PasswordField(FormField):
    def __init__(
        self,
        label: str = "Senha",
        *,
        required: bool = False,
        min_length: int = 0,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(PasswordFieldModel(label, required=required, min_length=min_length), parent)

    def _create_editor(self) -> QLineEdit:
        editor = QLineEdit()
        editor.setEchoMode(QLineEdit.EchoMode.Password)
        return editor

    @property
    def value(self) -> str:
        return self.text()


class EmailField(FormField):
    def __init__(
        self,
        label: str = "E-mail",
        *,
        required: bool = False,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(EmailFieldModel(label, required=required), parent)
        self.editor.setPlaceholderText("nome@exemplo.com")

    @property
    def value(self) -> str:
        return self.text().strip()


class DocumentField(FormField):
    """Base for the digit-masked document and phone fields."""

    kind = DocumentKind.GENERIC
    placeholder = ""

    def __init__(
        self,
        label: Optional[str] = None,
        *,
        required: bool = False,
        gender: Optional[Gender] = None,
        check_digits: bool = True,
        kind: Optional[DocumentKind] = None,
        placeholder: Optional[str] = None,
        parent: Optional[QWidget] = None,
    ) -> None:
        kind = kind or type(self).kind
        model = DocumentFieldModel(
            kind, label, required=required, gender=gender, check_digits=check_digits
        )
        super().__init__(model, parent)
        self.kind = kind
        placeholder = type(self).placeholder if placeholder is None else placeholder
        if placeholder:
            self.editor.setPlaceholderText(placeholder)

    @property
    def value(self) -> DocumentValue:
        self._sync_from_editor()
        return self.model.value

    @property
    def status(self) -> FieldStatus:
        self._sync_from_editor()
        return self.model.status

    def unmasked_value(self) -> str:
        self._sync_from_editor()
        return self.model.unmasked_value()

    def set_check_digits(self, enabled: bool) -> None:
        self.model.check_digits = enabled


class CpfField(DocumentField):
    kind = DocumentKind.CPF
    placeholder = "000.000.000-00"


class CnpjField(DocumentField):
    kind = DocumentKind.CNPJ
    placeholder = "00.000.000/0000-00"


class CpfCnpjField(DocumentField):
    """CPF while up to 11 digits are typed, CNPJ from the 12th on."""

    kind = DocumentKind.CPF_CNPJ

    def is_cnpj(self) -> bool:
        self._sync_from_editor()
        return self.model.is_cnpj()

    def is_cpf(self) -> bool:
        self._sync_from_editor()
        return self.model.is_cpf()


class CepField(DocumentField):
    kind = DocumentKind.CEP
    placeholder = "00000-000"


class PhoneField(DocumentField):
    def __init__(
        self,
        label: str = "Telefone",
        *,
        mobile: bool = False,
        required: bool = False,
        gender: Optional[Gender] = None,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(
            label,
            required=required,
            gender=gender,
            kind=DocumentKind.PHONE_MOBILE if mobile else DocumentKind.PHONE_FIXED,
            placeholder="(00) 00000-0000" if mobile else "(00) 0000-0000",
            parent=parent,
        )

    def is_mobile(self) -> bool:
        return self.kind is DocumentKind.PHONE_MOBILE


class CurrencyField(FormField):
    def __init__(
        self,
        label: str = "Valor",
        *,
        required: bool = False,
        gender: Optional[Gender] = None,
        minimum=None,
        maximum=None,
        prefix: str = DEFAULT_CURRENCY_PREFIX,
        parent: Optional[QWidget] = None,
    ) -> None:
        model = CurrencyFieldModel(
            label,
            required=required,
            gender=gender,
            minimum=minimum,
            maximum=maximum,
            prefix=prefix,
        )
        super().__init__(model, parent)
        self.editor.setAlignment(Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter)

    def _cursor_after_edit(self, edited: str, cursor: int, canonical: str) -> int:
        # Amounts grow from the right
        return len(canonical)

    @property
    def value(self) -> Decimal:
        self._sync_from_editor()
        return self.model.value

    def set_value(self, value) -> None:
        self.editor.setText(self.model.set_value(value))

    def set_range(self, minimum=None, maximum=None) -> None:
        self.model.set_range(minimum, maximum)

    def set_prefix(self, prefix: str) -> None:
        self.model.set_prefix(prefix)
        self.editor.setText(self.model.text)


class DateField(FormField):
    """Masked ``dd/mm/aaaa`` date with strict parsing."""

    flexible = False

    def __init__(
        self,
        label: str = "Data",
        *,
        required: bool = False,
        gender: Optional[Gender] = None,
        model: Optional[DateFieldModel] = None,
        parent: Optional[QWidget] = None,
    ) -> None:
        if model is None:
            model = DateFieldModel(label, required=required, gender=gender, flexible=type(self).flexible)
        super().__init__(model, parent)
        self.editor.setPlaceholderText("dd/mm/aaaa")

    @property
    def value(self) -> Optional[date]:
        self._sync_from_editor()
        return self.model.value

    def set_value(self, value: Optional[date]) -> None:
        self.editor.setText(self.model.set_value(value))


class DatePickerField(DateField):
    """Free-typed date: ``1-2-24`` or ``01.02.2024`` become ``01/02/2024``
    when editing finishes."""

    flexible = True

    def _on_editing_finished(self) -> None:
        self._sync_from_editor()
        committed = self.model.commit()
        if committed != self.editor.text():
            self.editor.setText(committed)


class PeriodField(QWidget, Validatable):
    """Start and end date pickers side by side, validated as one period."""

    def __init__(
        self,
        label: str = "Período",
        *,
        required: bool = False,
        start_label: str = "Data inicial",
        end_label: str = "Data final",
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.model = PeriodFieldModel(
            label, required=required, start_label=start_label, end_label=end_label
        )

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        self.label = QLabel()
        layout.addWidget(self.label)
        row = QHBoxLayout()
        layout.addLayout(row)
        self.start = DatePickerField(model=self.model.start)
        self.end = DatePickerField(model=self.model.end)
        row.addWidget(self.start)
        row.addWidget(self.end)
        self._refresh_label()

    def _refresh_label(self) -> None:
        self.label.setText(self.model.label + (REQUIRED_MARK if self.model.required else ""))

    def _pickers(self) -> Tuple["DatePickerField", "DatePickerField"]:
        return self.start, self.end

    @property
    def label_text(self) -> str:
        return self.model.label

    def is_required(self) -> bool:
        return self.model.required

    def set_required(self, required: bool) -> None:
        for picker in self._pickers():
            picker.set_required(required)
        self._refresh_label()

    @property
    def value(self) -> Tuple[Optional[date], Optional[date]]:
        for picker in self._pickers():
            picker._sync_from_editor()
        return self.model.value

    def set_period(self, start: Optional[date], end: Optional[date]) -> None:
        self.start.set_value(start)
        self.end.set_value(end)

    def clear(self) -> None:
        for picker in self._pickers():
            picker.clear()

    def focus_editor(self) -> None:
        failing = [picker for picker in self._pickers() if picker.last_error_message()]
        (failing[0] if failing else self.start).focus_editor()

    def validate(self) -> bool:
        for picker in self._pickers():
            picker._sync_from_editor()
        return self.model.validate()

    def last_error_message(self) -> Optional[str]:
        return self.model.last_error_message()

    def validation_result(self) -> ValidationResult:
        return self.model.validation_result()

    def show_error(self) -> None:
        for picker in self._pickers():
            if picker.last_error_message():
                picker.show_error()

    def clear_error(self) -> None:
        for picker in self._pickers():
            picker.clear_error()

    def is_error_shown(self) -> bool:
        return self.model.is_error_shown()


class FileField(FormField):
    """Read-only path filled by a file or folder picker."""

    def __init__(
        self,
        label: Optional[str] = None,
        *,
        required: bool = False,
        gender: Optional[Gender] = None,
        directory: bool = False,
        file_filter: str = "",
        model: Optional[FileFieldModel] = None,
        parent: Optional[QWidget] = None,
    ) -> None:
        if model is None:
            model = FileFieldModel(label, required=required, gender=gender, directory=directory)
        super().__init__(model, parent)
        self.file_filter = file_filter
        self.editor.setReadOnly(True)

        self.choose_button = QPushButton(_("file_choose"))
        self.choose_button.clicked.connect(self.choose)
        self.clear_button = QPushButton(_("file_clear"))
        self.clear_button.clicked.connect(self.clear)
        self.editor_row.addWidget(self.choose_button)
        self.editor_row.addWidget(self.clear_button)
        self._refresh_buttons()

    def _refresh_buttons(self) -> None:
        self.clear_button.setEnabled(self.isEnabled() and self.model.path is not None)

    def choose(self) -> None:
        if self.model.directory:
            selected = QFileDialog.getExistingDirectory(self, self.model.label)
        else:
            selected, _selected_filter = QFileDialog.getOpenFileName(
                self, self.model.label, "", self.file_filter
            )
        if selected:
            self.set_path(selected)

    @property
    def path(self) -> Optional[Path]:
        return self.model.path

    def set_path(self, path: Optional[Union[str, Path]]) -> None:
        self.editor.setText(self.model.set_path(path))
        self._refresh_buttons()

    def clear(self) -> None:
        super().clear()
        self._refresh_buttons()


class ImageField(FileField):
    def __init__(
        self,
        label: str = "Imagem",
        *,
        required: bool = False,
        gender: Optional[Gender] = None,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(
            file_filter="Imagens (*.png *.jpg *.jpeg *.gif *.bmp)",
            model=ImageFieldModel(label, required=required, gender=gender),
            parent=parent,
        )

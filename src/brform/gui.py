"""PySide6 form dialog that validates every field before confirming."""

from __future__ import annotations

import logging
import sys
from typing import Callable, List, Optional

from PySide6.QtWidgets import (
    QApplication,
    QDialog,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QScrollArea,
    QVBoxLayout,
    QWidget,
)

from brform.config import FormConfig
from brform.constants import ERROR_COLOR
from brform.i18n import _
from brform.validation import AggregateResult, iter_validatables, validate_all
from brform.widgets import (
    CepField,
    CpfCnpjField,
    CurrencyField,
    DateField,
    EmailField,
    PeriodField,
    PhoneField,
    TextField,
)

logger = logging.getLogger(__name__)

# Status icons for accessibility
ICON_SUCCESS = "✅"
ICON_ERROR = "❌"


class FormDialog(QDialog):
    """Modal form; fields placed anywhere inside its content are validated
    together when the user confirms."""

    def __init__(
        self,
        title: str = "",
        parent: Optional[QWidget] = None,
        *,
        on_confirm: Optional[Callable[[], None]] = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle(title)
        self.setModal(True)
        self.on_confirm = on_confirm
        self.validate_on_confirm = True
        self.confirmed = False
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()

        self.content = QWidget()
        self.content_layout = QVBoxLayout()
        self.content.setLayout(self.content_layout)

        self.scroll = QScrollArea()
        self.scroll.setWidgetResizable(True)
        self.scroll.setWidget(self.content)
        layout.addWidget(self.scroll)

        self.status_label = QLabel("")
        layout.addWidget(self.status_label)

        buttons = QHBoxLayout()
        buttons.addStretch(1)
        self.confirm_button = QPushButton(_("dialog_confirm"))
        self.confirm_button.setDefault(True)
        self.confirm_button.clicked.connect(self._confirm)
        self.cancel_button = QPushButton(_("dialog_cancel"))
        self.cancel_button.clicked.connect(self._cancel)
        buttons.addWidget(self.confirm_button)
        buttons.addWidget(self.cancel_button)
        layout.addLayout(buttons)

        self.setLayout(layout)

    def add_field(self, field: QWidget) -> QWidget:
        """Append ``field`` below the existing ones."""
        self.content_layout.addWidget(field)
        return field

    def set_content(self, content: QWidget) -> None:
        """Replace the content with a prebuilt panel; nested fields are
        discovered when validating."""
        self.content = content
        self.scroll.setWidget(content)

    def validate_fields(self) -> AggregateResult:
        """Validate every field, focus the first failure and report it."""
        result = validate_all(self.content)
        if result.all_valid:
            self._set_status(_("form_valid"))
            return result

        first = result.first_failure
        focus = getattr(first, "focus_editor", None)
        if callable(focus):
            focus()
            self.scroll.ensureWidgetVisible(first)
        self._set_status(result.message or "", error=True)
        logger.info("Form rejected: %d invalid fields", len(result.failures))
        return result

    def clear_errors(self) -> None:
        """Remove the error state from every field and the status line."""
        for field in iter_validatables(self.content):
            field.clear_error()
        self.status_label.clear()

    def clear_fields(self) -> None:
        """Empty every field that supports it, then clear the errors."""
        for field in iter_validatables(self.content):
            clear = getattr(field, "clear", None)
            if callable(clear):
                clear()
        self.clear_errors()

    def _confirm(self) -> None:
        if self.validate_on_confirm and not self.validate_fields().all_valid:
            return

        self.confirmed = True
        if self.on_confirm is not None:
            self.on_confirm()
        self.accept()

    def _cancel(self) -> None:
        self.confirmed = False
        self.reject()

    def _set_status(self, message: str, *, error: bool = False) -> None:
        if message and not message.startswith((ICON_SUCCESS, ICON_ERROR)):
            icon = ICON_ERROR if error else ICON_SUCCESS
            message = f"{icon} {message}"

        self.status_label.setText(message)
        color = ERROR_COLOR if error else "#2e7d32"
        self.status_label.setStyleSheet(f"color: {color}; font-weight: bold;")


def build_demo_dialog(config: Optional[FormConfig] = None) -> FormDialog:
    """Customer registration form wired with the stock fields."""

    config = config or FormConfig.from_environment()
    dialog = FormDialog(_("demo_title"))

    fields: List[QWidget] = [
        TextField(_("demo_name"), required=True, min_length=3),
        EmailField(_("demo_email"), required=True),
        CpfCnpjField(_("demo_document"), required=True, check_digits=config.check_digits),
        DateField(_("demo_birth")),
        PhoneField(_("demo_phone"), mobile=True),
        CepField(_("demo_zip")),
        CurrencyField(_("demo_income"), prefix=config.currency_prefix, minimum=0),
        PeriodField(_("demo_period")),
    ]
    for field in fields:
        dialog.add_field(field)

    editors = []
    for field in fields:
        if isinstance(field, PeriodField):
            editors.extend([field.start.editor, field.end.editor])
        else:
            editors.append(field.editor)
    for previous, current in zip(editors, editors[1:]):
        QWidget.setTabOrder(previous, current)

    return dialog


def launch_gui(config: Optional[FormConfig] = None) -> int:
    """Start the PySide6 application showing the demo form."""

    app = QApplication.instance() or QApplication(sys.argv)
    dialog = build_demo_dialog(config)
    dialog.resize(480, 560)
    dialog.show()
    return app.exec()


if __name__ == "__main__":
    launch_gui()

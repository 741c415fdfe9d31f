"""Command-line entrypoint for brform."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from brform.config import FormConfig, load_env_file, save_env_file
from brform.fields import CurrencyFieldModel, DateFieldModel, DocumentFieldModel
from brform.i18n import _, set_locale
from brform.logging_config import configure_logging
from brform.shared.masks import DocumentKind, remask_text

logger = logging.getLogger(__name__)

KIND_CHOICES = [kind.value for kind in DocumentKind]


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="brform",
        description="Mask and validate Brazilian documents (CPF, CNPJ, CEP, phones, dates, currency).",
    )
    sub = parser.add_subparsers(dest="command")

    check = sub.add_parser("check", help="validate a value and print the result")
    check.add_argument("kind", choices=KIND_CHOICES)
    check.add_argument("value")
    check.add_argument("--optional", action="store_true", help="accept an empty value")
    check.add_argument(
        "--no-check-digits", action="store_true", help="only check completeness for CPF/CNPJ"
    )

    mask = sub.add_parser("mask", help="print the canonical masked form of a value")
    mask.add_argument("kind", choices=KIND_CHOICES)
    mask.add_argument("value")

    config = sub.add_parser("config", help="show the effective settings")
    config.add_argument("--save", action="store_true", help="persist them to the env file")

    sub.add_parser("gui", help="open the demo form")
    return parser


def _model_for(kind: DocumentKind, *, required: bool, check_digits: bool, config: FormConfig):
    if kind is DocumentKind.CURRENCY:
        return CurrencyFieldModel(required=required, prefix=config.currency_prefix)
    if kind is DocumentKind.DATE:
        return DateFieldModel(required=required)
    return DocumentFieldModel(kind, required=required, check_digits=check_digits)


def _check(args: argparse.Namespace, config: FormConfig) -> int:
    kind = DocumentKind(args.kind)
    model = _model_for(
        kind,
        required=not args.optional,
        check_digits=config.check_digits and not args.no_check_digits,
        config=config,
    )
    masked = model.set_text(args.value)
    if model.validate():
        print(f"{masked}\t{_('valid', label=model.label)}")
        return 0
    print(f"{masked}\t{model.last_error_message()}")
    return 1


def _mask(args: argparse.Namespace, config: FormConfig) -> int:
    print(remask_text(DocumentKind(args.kind), args.value, prefix=config.currency_prefix))
    return 0


def _config(args: argparse.Namespace, config: FormConfig) -> int:
    env = config.to_environment()
    for key, value in env.items():
        print(f"{key}={value}")
    if args.save and not save_env_file(env):
        return 1
    return 0


def _gui(args: argparse.Namespace, config: FormConfig) -> int:
    # Import lazily so PySide6 is only needed for the GUI
    from brform.gui import launch_gui

    return launch_gui(config)


COMMANDS = {
    "check": _check,
    "mask": _mask,
    "config": _config,
    "gui": _gui,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the brform console script."""
    load_env_file()
    config = FormConfig.from_environment()
    configure_logging(
        level=config.log_level,
        log_format=config.log_format,
        handler_type=config.log_handler,
        log_file=config.log_file,
    )
    set_locale(config.locale)

    args = _build_parser().parse_args(argv)
    command = args.command or "gui"
    logger.debug("Running command %s", command)
    return COMMANDS[command](args, config)


if __name__ == "__main__":
    sys.exit(main())

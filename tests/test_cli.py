import importlib.util
import logging
from pathlib import Path

import pytest

from brform import cli


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("BRFORM_ENV_FILE", str(tmp_path / "brform.env"))
    for key in (
        "BRFORM_LOCALE",
        "BRFORM_CURRENCY_PREFIX",
        "BRFORM_CHECK_DIGITS",
        "BRFORM_LOG_LEVEL",
        "BRFORM_LOG_FORMAT",
        "BRFORM_LOG_FILE",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("BRFORM_LOG_HANDLER", "console")

    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield tmp_path
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def test_check_valid_cpf(capsys):
    assert cli.main(["check", "cpf", "11144477735"]) == 0
    out = capsys.readouterr().out
    assert out == "111.444.777-35\tCPF válido\n"


def test_check_invalid_cpf(capsys):
    assert cli.main(["check", "cpf", "123.456.789-00"]) == 1
    assert "CPF inválido" in capsys.readouterr().out


def test_check_incomplete_cnpj(capsys):
    assert cli.main(["check", "cnpj", "11222"]) == 1
    assert capsys.readouterr().out == "11.222\tCNPJ está incompleto\n"


def test_check_empty_value(capsys):
    assert cli.main(["check", "cep", ""]) == 1
    assert "CEP é obrigatório" in capsys.readouterr().out
    assert cli.main(["check", "cep", "", "--optional"]) == 0


def test_check_without_check_digits(capsys):
    assert cli.main(["check", "cpf", "12345678900", "--no-check-digits"]) == 0


def test_check_date(capsys):
    assert cli.main(["check", "date", "31022024"]) == 1
    assert "31/02/2024\tData contém data inválida" in capsys.readouterr().out


def test_check_uses_locale_from_environment(monkeypatch, capsys):
    monkeypatch.setenv("BRFORM_LOCALE", "en")
    assert cli.main(["check", "cpf", ""]) == 1
    assert "CPF is required" in capsys.readouterr().out


def test_mask(capsys):
    assert cli.main(["mask", "phone_mobile", "11987654321"]) == 0
    assert capsys.readouterr().out.strip() == "(11) 98765-4321"
    cli.main(["mask", "currency", "12345"])
    assert capsys.readouterr().out.strip() == "R$ 123,45"


def test_mask_rejects_unknown_kind(capsys):
    with pytest.raises(SystemExit):
        cli.main(["mask", "passport", "123"])


def test_config_prints_and_saves(isolated_environment, capsys):
    assert cli.main(["config", "--save"]) == 0
    out = capsys.readouterr().out
    assert "BRFORM_LOCALE=pt_BR" in out
    saved = (isolated_environment / "brform.env").read_text(encoding="utf-8")
    assert "BRFORM_CHECK_DIGITS=true" in saved


def test_env_file_settings_are_applied(isolated_environment, monkeypatch, capsys):
    (isolated_environment / "brform.env").write_text("BRFORM_CHECK_DIGITS=false\n", encoding="utf-8")
    # load_env_file writes straight into os.environ; register the key so it is restored
    monkeypatch.setenv("BRFORM_CHECK_DIGITS", "placeholder")
    monkeypatch.delenv("BRFORM_CHECK_DIGITS")
    assert cli.main(["check", "cpf", "12345678900"]) == 0


def test_entrypoint_script_dispatches(monkeypatch):
    calls = []
    monkeypatch.setitem(cli.COMMANDS, "gui", lambda args, config: calls.append("gui") or 0)

    spec = importlib.util.spec_from_file_location(
        "brform_cli", Path(__file__).resolve().parent.parent / "main.py"
    )
    cli_entry = importlib.util.module_from_spec(spec)
    assert spec and spec.loader
    spec.loader.exec_module(cli_entry)

    assert cli_entry.main([]) == 0
    assert calls == ["gui"]

from brform.config import FormConfig, env_file_path, load_env_file, save_env_file


def test_from_environment_defaults(monkeypatch):
    for key in FormConfig().to_environment():
        monkeypatch.delenv(key, raising=False)

    config = FormConfig.from_environment()

    assert config.locale == "pt_BR"
    assert config.currency_prefix == "R$ "
    assert config.check_digits is True
    assert config.log_handler == "console"


def test_from_environment_overrides(monkeypatch):
    monkeypatch.setenv("BRFORM_LOCALE", "en")
    monkeypatch.setenv("BRFORM_CHECK_DIGITS", "no")
    monkeypatch.setenv("BRFORM_LOG_LEVEL", "DEBUG")

    config = FormConfig.from_environment()

    assert config.locale == "en"
    assert config.check_digits is False
    assert config.log_level == "DEBUG"


def test_to_environment_round_trips(monkeypatch):
    original = FormConfig(locale="en", currency_prefix="US$ ", check_digits=False)
    for key, value in original.to_environment().items():
        monkeypatch.setenv(key, value)

    assert FormConfig.from_environment() == original


def test_env_file_path_honours_override(monkeypatch, tmp_path):
    target = tmp_path / "custom.env"
    monkeypatch.setenv("BRFORM_ENV_FILE", str(target))
    assert env_file_path() == target


def test_load_env_file_does_not_override_environment(monkeypatch, tmp_path):
    env_file = tmp_path / "brform.env"
    env_file.write_text(
        "# saved settings\nBRFORM_LOCALE=en\n\nBRFORM_LOG_LEVEL=DEBUG\n", encoding="utf-8"
    )
    monkeypatch.setenv("BRFORM_ENV_FILE", str(env_file))
    monkeypatch.setenv("BRFORM_LOCALE", "pt_BR")
    # load_env_file writes straight into os.environ; register the key so it is restored
    monkeypatch.setenv("BRFORM_LOG_LEVEL", "placeholder")
    monkeypatch.delenv("BRFORM_LOG_LEVEL")

    values = load_env_file()

    assert values == {"BRFORM_LOCALE": "en", "BRFORM_LOG_LEVEL": "DEBUG"}
    assert FormConfig.from_environment().locale == "pt_BR"
    assert FormConfig.from_environment().log_level == "DEBUG"


def test_load_missing_env_file(monkeypatch, tmp_path):
    monkeypatch.setenv("BRFORM_ENV_FILE", str(tmp_path / "missing.env"))
    assert load_env_file() == {}


def test_save_env_file(monkeypatch, tmp_path):
    env_file = tmp_path / "brform.env"
    monkeypatch.setenv("BRFORM_ENV_FILE", str(env_file))

    assert save_env_file({"BRFORM_LOCALE": "en", "BRFORM_CHECK_DIGITS": "false"}) is True
    assert env_file.read_text(encoding="utf-8") == "BRFORM_LOCALE=en\nBRFORM_CHECK_DIGITS=false"


def test_save_env_file_reports_failure(monkeypatch, tmp_path):
    monkeypatch.setenv("BRFORM_ENV_FILE", str(tmp_path / "missing-dir" / "brform.env"))
    assert save_env_file({"BRFORM_LOCALE": "en"}) is False

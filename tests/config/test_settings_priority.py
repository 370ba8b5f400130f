import pytest

from intake.config.settings import Settings, loadSettings


def test_defaults_without_sources(monkeypatch):
    for name in (
        "INTAKE_VARIANTS_PATH",
        "INTAKE_CSV_DELIMITER",
        "INTAKE_CSV_ENCODING",
        "INTAKE_STRICT_COLUMNS",
        "INTAKE_LOG_DIR",
        "INTAKE_REPORT_DIR",
        "INTAKE_LOG_LEVEL",
        "INTAKE_REPORT_ITEMS_LIMIT",
    ):
        monkeypatch.delenv(name, raising=False)
    loaded = loadSettings(config_path=None, cli_overrides={})
    assert loaded.settings == Settings()
    assert loaded.sources_used == []


def test_priority_cli_over_env_over_config(tmp_path, monkeypatch):
    cfg = tmp_path / "config.yml"
    cfg.write_text(
        "\n".join([
            'csv_delimiter: ";"',
            'csv_encoding: "cp1251"',
            'log_level: "DEBUG"',
            "report_items_limit: 10",
        ]),
        encoding="utf-8",
    )

    # ENV overrides config
    monkeypatch.setenv("INTAKE_CSV_DELIMITER", "tab")
    monkeypatch.setenv("INTAKE_LOG_LEVEL", "WARN")
    monkeypatch.setenv("INTAKE_STRICT_COLUMNS", "yes")

    # CLI overrides env
    loaded = loadSettings(
        config_path=str(cfg),
        cli_overrides={"log_level": "ERROR", "report_items_limit": None},
    )
    settings = loaded.settings
    assert settings.csv_encoding == "cp1251"
    assert settings.report_items_limit == 10
    assert settings.csv_delimiter == "tab"
    assert settings.strict_columns is True
    assert settings.log_level == "ERROR"
    assert loaded.sources_used == ["config", "env", "cli"]


def test_invalid_bool_env(monkeypatch):
    monkeypatch.setenv("INTAKE_STRICT_COLUMNS", "maybe")
    with pytest.raises(ValueError):
        loadSettings(config_path=None, cli_overrides={})

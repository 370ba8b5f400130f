from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os
import yaml


@dataclass(frozen=True)
class Settings:
    # Schema variants
    variants_path: str | None = None

    # CSV
    csv_delimiter: str = ","
    csv_encoding: str = "utf-8-sig"
    strict_columns: bool = False

    # Paths
    log_dir: str = "./logs"
    report_dir: str = "./reports"

    # Misc
    log_level: str = "INFO"
    report_items_limit: int = 200


@dataclass(frozen=True)
class LoadedSettings:
    settings: Settings
    sources_used: list[str]


def _read_yaml_config(path: Path) -> dict:
    if not path.exists():
        return {}
    if not path.is_file():
        return {}
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            return {}
        return data


def _env_get(name: str) -> str | None:
    v = os.getenv(name)
    if v is None or v.strip() == "":
        return None
    return v.strip()


def parse_int(v: str | None) -> int | None:
    if v is None:
        return None
    return int(v)


def parse_bool(v: str | None) -> bool | None:
    if v is None:
        return None
    vv = v.lower()
    if vv in ("1", "true", "yes", "y"):
        return True
    if vv in ("0", "false", "no", "n"):
        return False
    raise ValueError(f"Invalid boolean env value: {v}")


_ENV_NAMES = {
    "variants_path": "INTAKE_VARIANTS_PATH",
    "csv_delimiter": "INTAKE_CSV_DELIMITER",
    "csv_encoding": "INTAKE_CSV_ENCODING",
    "strict_columns": "INTAKE_STRICT_COLUMNS",
    "log_dir": "INTAKE_LOG_DIR",
    "report_dir": "INTAKE_REPORT_DIR",
    "log_level": "INTAKE_LOG_LEVEL",
    "report_items_limit": "INTAKE_REPORT_ITEMS_LIMIT",
}


def loadSettings(
    config_path: str | None,
    cli_overrides: dict,
) -> LoadedSettings:
    """
    Priority: CLI > ENV > config > defaults
    """
    sources: list[str] = []
    defaults = Settings()

    # 1) config file
    cfg: dict = {}
    if config_path:
        cfg = _read_yaml_config(Path(config_path))
        if cfg:
            sources.append("config")

    # 2) env
    env = {key: _env_get(name) for key, name in _ENV_NAMES.items()}
    if any(v is not None for v in env.values()):
        sources.append("env")

    # merge config -> env -> cli
    merged = {key: cfg.get(key, getattr(defaults, key)) for key in _ENV_NAMES}

    # apply env
    for key in ("variants_path", "csv_delimiter", "csv_encoding", "log_dir", "report_dir", "log_level"):
        if env[key] is not None:
            merged[key] = env[key]
    if env["strict_columns"] is not None:
        merged["strict_columns"] = parse_bool(env["strict_columns"])
    if env["report_items_limit"] is not None:
        merged["report_items_limit"] = parse_int(env["report_items_limit"])

    # 3) apply CLI overrides (only those explicitly passed)
    if any(v is not None for v in cli_overrides.values()):
        sources.append("cli")

    for k, v in cli_overrides.items():
        if v is None:
            continue
        merged[k] = v

    settings = Settings(
        variants_path=merged["variants_path"],
        csv_delimiter=str(merged["csv_delimiter"]),
        csv_encoding=str(merged["csv_encoding"]),
        strict_columns=bool(merged["strict_columns"]),
        log_dir=str(merged["log_dir"]),
        report_dir=str(merged["report_dir"]),
        log_level=str(merged["log_level"]),
        report_items_limit=int(merged["report_items_limit"]),
    )

    return LoadedSettings(settings=settings, sources_used=sources)

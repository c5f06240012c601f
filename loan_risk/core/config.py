"""Configuration loading utilities for YAML-based application settings."""

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Any, Optional

import yaml

from loan_risk.models.enums import LoanType
from loan_risk.models.exceptions import ConfigurationError

from .logging_config import get_logger


logger = get_logger(__name__)
_BASE_DIR = Path(__file__).resolve().parent.parent
_CONFIG_PATH = _BASE_DIR / "config.yml"
_CONFIG_ENV_VAR = "LOAN_RISK_CONFIG"
_PROFILE_BACKENDS = {"memory", "json"}


@dataclass(frozen=True)
class AppSettings:
    """Application settings loaded from YAML configuration file."""

    app_name: str
    debug: bool
    host: str
    port: int
    log_level: str
    default_loan_type: str
    profiles_backend: str
    profiles_path: str
    seed_profiles_path: Optional[str]
    approve_min_score: int
    review_min_score: int


def _to_bool(value: Any, default: bool = False) -> bool:
    """Convert value to bool with a default fallback."""
    try:
        if isinstance(value, bool):
            return value
        return value.strip().lower() in {"1", "true", "yes", "on"}
    except (AttributeError, ValueError):
        logger.warning("Invalid boolean value '%s'. Using default=%s", value, default)
        return default


def _to_int(value: Any, default: int) -> int:
    """Convert value to int with a default fallback."""
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning("Invalid integer value '%s'. Using default=%s", value, default)
        return default


def _to_path(value: Any, default: Optional[str]) -> Optional[str]:
    """Resolve a configured path relative to the package directory."""
    if value is None or not str(value).strip():
        return default
    path = Path(str(value).strip())
    if not path.is_absolute():
        path = _BASE_DIR / path
    return str(path)


def _config_path(path: Optional[str] = None) -> Path:
    """Return the active config file path, honouring the environment override."""
    if path:
        return Path(path)
    override = os.environ.get(_CONFIG_ENV_VAR)
    if override:
        return Path(override)
    return _CONFIG_PATH


def _read_config(path: Optional[str] = None) -> dict:
    """Read and parse YAML configuration."""
    config_path = _config_path(path)
    try:
        with config_path.open("r", encoding="utf-8") as config_file:
            config_data = yaml.safe_load(config_file) or {}
        if not isinstance(config_data, dict):
            logger.warning("Config file %s does not contain a mapping. Falling back to defaults.", config_path)
            return {}
        logger.info("Configuration loaded from %s", config_path)
        return config_data
    except FileNotFoundError:
        logger.warning("Config file not found at %s. Falling back to defaults.", config_path)
        return {}
    except yaml.YAMLError:
        logger.exception("Failed to parse config file %s", config_path)
        return {}


def get_env(key: str, default: Optional[str] = None, path: Optional[str] = None) -> Optional[str]:
    """Config reader using dot-notation keys, e.g. ``scoring.default_loan_type``."""
    current: Any = _read_config(path)
    for part in key.split("."):
        if not isinstance(current, dict) or part not in current:
            return default
        current = current[part]
    if current is None:
        return default
    return str(current)


def load_settings(path: Optional[str] = None) -> AppSettings:
    """Load and validate application settings from ``config.yml``."""
    config = _read_config(path)
    app_cfg = config.get("app") or {}
    scoring_cfg = config.get("scoring") or {}
    profiles_cfg = config.get("profiles") or {}
    recommendation_cfg = scoring_cfg.get("recommendation") or {}

    profiles_backend = str(profiles_cfg.get("backend", "memory")).strip().lower()
    if profiles_backend not in _PROFILE_BACKENDS:
        logger.warning("Unsupported profiles backend '%s'. Using default=memory", profiles_backend)
        profiles_backend = "memory"

    default_loan_type = str(scoring_cfg.get("default_loan_type", "general"))
    try:
        default_loan_type = LoanType.parse(default_loan_type).value
    except ConfigurationError:
        logger.warning("Unsupported default_loan_type '%s'. Using default=general", default_loan_type)
        default_loan_type = LoanType.GENERAL.value

    approve_min_score = _to_int(recommendation_cfg.get("approve_min_score", 80), 80)
    review_min_score = _to_int(recommendation_cfg.get("review_min_score", 65), 65)
    if review_min_score > approve_min_score:
        logger.warning(
            "review_min_score=%s exceeds approve_min_score=%s. Using defaults 65/80.",
            review_min_score,
            approve_min_score,
        )
        approve_min_score, review_min_score = 80, 65

    return AppSettings(
        app_name=str(app_cfg.get("name", "Loan Risk Scoring API")),
        debug=_to_bool(app_cfg.get("debug", False), False),
        host=str(app_cfg.get("host", "127.0.0.1")),
        port=_to_int(app_cfg.get("port", 8000), 8000),
        log_level=str(app_cfg.get("log_level", "INFO")),
        default_loan_type=default_loan_type,
        profiles_backend=profiles_backend,
        profiles_path=_to_path(profiles_cfg.get("path"), str(_BASE_DIR / "settings" / "profiles.json")),
        seed_profiles_path=_to_path(
            profiles_cfg.get("seed_path"),
            str(_BASE_DIR / "settings" / "seed_profiles.json"),
        ),
        approve_min_score=approve_min_score,
        review_min_score=review_min_score,
    )

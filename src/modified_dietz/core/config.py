"""Application configuration — loaded from config.json at project root."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .finance.returns import DEFAULT_EPSILON, validate_epsilon

logger = logging.getLogger(__name__)


@dataclass
class AppConfig:
    epsilon: float = DEFAULT_EPSILON
    currency: str = "EUR"  # display only, no conversion
    decimals: int = 2


_DEFAULTS = AppConfig()
_cached: Optional[AppConfig] = None


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (where pyproject.toml lives)."""
    current = Path(__file__).resolve().parent
    for _ in range(10):
        if (current / "pyproject.toml").exists():
            return current
        current = current.parent
    # Fallback: current working directory
    return Path.cwd()


def config_path() -> Path:
    """Location of config.json."""
    return _find_project_root() / "config.json"


def get_config() -> AppConfig:
    global _cached
    if _cached is not None:
        return _cached
    path = config_path()
    if not path.exists():
        _cached = AppConfig()
        return _cached
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        epsilon = float(data.get("epsilon", _DEFAULTS.epsilon))
        validate_epsilon(epsilon)
        _cached = AppConfig(
            epsilon=epsilon,
            currency=data.get("currency", _DEFAULTS.currency),
            decimals=int(data.get("decimals", _DEFAULTS.decimals)),
        )
    except Exception as e:
        logger.warning("Ignoring unreadable config %s: %s", path, e)
        _cached = AppConfig()
    return _cached


def save_config(cfg: AppConfig) -> None:
    global _cached
    validate_epsilon(cfg.epsilon)
    _cached = cfg
    data = {
        "epsilon": cfg.epsilon,
        "currency": cfg.currency,
        "decimals": cfg.decimals,
    }
    config_path().write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")


def reset_config_cache() -> None:
    global _cached
    _cached = None

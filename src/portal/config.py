import copy
import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import ConfigError

DEFAULT_CONFIG: Dict[str, Any] = {
    "knowledge": {"dir": None},
    "cache": {"ttl_seconds": 300, "sweep_probability": 0.1},
    "analytics": {"max_records": 1000, "api_key": "admin-key", "success_threshold": 60},
    "selector": {"related_min_confidence": 60, "max_related": 3},
    "chat": {"history_window": 10},
    "llm": {
        "api_key": "",
        "model": "gemini-1.5-pro",
        "endpoint": "https://generativelanguage.googleapis.com/v1beta/models",
        "temperature": 0.7,
        "max_output_tokens": 800,
        "timeout_seconds": 30,
        "memory_limit": 20,
    },
    "logging": {"level": "INFO", "dir": None},
}


def load_config(path: str) -> Dict[str, Any]:
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    if config_path.suffix.lower() in {".json"}:
        with config_path.open("r", encoding="utf-8") as f:
            return json.load(f)

    if config_path.suffix.lower() in {".yml", ".yaml"}:
        import yaml

        with config_path.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    raise ConfigError(f"Unsupported config format: {config_path.suffix}")


def merge_config(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


def resolve_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Defaults, then the optional file, then secrets from the environment."""
    config = copy.deepcopy(DEFAULT_CONFIG)
    path = path or os.environ.get("PORTAL_CONFIG")
    if path:
        loaded = load_config(path)
        if not isinstance(loaded, dict):
            raise ConfigError(f"Config root must be a mapping: {path}")
        config = merge_config(config, loaded)

    if os.environ.get("ANALYTICS_API_KEY"):
        config["analytics"]["api_key"] = os.environ["ANALYTICS_API_KEY"]
    if os.environ.get("GEMINI_API_KEY"):
        config["llm"]["api_key"] = os.environ["GEMINI_API_KEY"]
    if os.environ.get("PORTAL_LOG_LEVEL"):
        config["logging"]["level"] = os.environ["PORTAL_LOG_LEVEL"]
    return config

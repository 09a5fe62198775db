# quadrant_insights/utils.py

import os
import copy
import logging
from datetime import datetime
from typing import Any, Dict, Optional

import yaml  # type: ignore
from dotenv import load_dotenv  # type: ignore

load_dotenv()  # picks up QUADRANT_INSIGHTS_CONFIG from a local .env

logger = logging.getLogger(__name__)


# ============================================================
# 📁 DIRECTORY MANAGEMENT
# ============================================================

# Absolute path to this file
current_file = os.path.abspath(__file__)

# Package root (quadrant_insights/)
package_root = os.path.dirname(current_file)

# Bundled configuration directory
config_path = os.path.join(package_root, "config")
default_config_file = os.path.join(config_path, "quadrant_config.yaml")

CONFIG_ENV_VAR = "QUADRANT_INSIGHTS_CONFIG"


# ============================================================
# ⚙️ CONFIG UTILITIES
# ============================================================

DEFAULT_CONFIG: Dict[str, Any] = {
    "classification": {
        "tolerance": 0.0001,
    },
    "chart": {
        "zoom_min": 0.5,
        "zoom_max": 10.0,
        "zoom_step": 1.5,
        "default_range": 10.0,
        "padding": 1.2,
        "colors": {
            "Healthy": "#22C55E",
            "Active but Dormant": "#F59E0B",
            "At Risk": "#8B5CF6",
            "Inactive & Dormant": "#EF4444",
            "Unknown": "#94A3B8",
        },
    },
    "analysis": {
        "top_at_risk_limit": 5,
    },
    "export": {
        "account_prefix": "account_data",
        "workspace_prefix": "workspace_data",
    },
}


def load_yaml(path: str) -> Dict[str, Any]:
    """General YAML loader with validation."""
    if not os.path.exists(path):
        raise FileNotFoundError(f"❌ YAML file not found: {path}")

    try:
        with open(path, "r") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"❌ Invalid YAML in {path}: {e}")

    if not isinstance(config, dict):
        raise ValueError(f"❌ YAML file empty or not a mapping: {path}")

    logger.debug("✅ Loaded YAML: %s", path)
    return config


def load_config(config_file: Optional[str] = None) -> Dict[str, Any]:
    """
    Load the quadrant configuration, layered over the built-in defaults.

    Resolution order: explicit ``config_file``, the ``QUADRANT_INSIGHTS_CONFIG``
    environment variable, then the bundled ``config/quadrant_config.yaml``.
    Any failure falls back to ``DEFAULT_CONFIG``.
    """
    final_path = config_file or os.getenv(CONFIG_ENV_VAR) or default_config_file

    try:
        loaded = load_yaml(final_path)
    except (FileNotFoundError, ValueError) as e:
        logger.warning("⚠️ Failed to load config '%s': %s. Using defaults.", final_path, e)
        return copy.deepcopy(DEFAULT_CONFIG)

    # If YAML has a top-level 'quadrant_insights' key, unwrap it
    if isinstance(loaded.get("quadrant_insights"), dict):
        loaded = loaded["quadrant_insights"]

    return merge_config(DEFAULT_CONFIG, loaded)


def merge_config(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


def get_section(config: Optional[Dict[str, Any]], section: str) -> Dict[str, Any]:
    """Return one config section, falling back to the default section."""
    if config is None:
        config = DEFAULT_CONFIG
    value = config.get(section)
    if isinstance(value, dict):
        return value
    return copy.deepcopy(DEFAULT_CONFIG.get(section, {}))


# ============================================================
# 🪵 LOGGING
# ============================================================

def configure_logging(level: int = logging.INFO) -> None:
    """Configure root logging for scripts and notebooks."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# ============================================================
# 🏷 FILENAMES
# ============================================================

def timestamp(now: Optional[datetime] = None) -> str:
    """ISO8601 timestamp (second precision) used in export filenames."""
    now = now or datetime.now()
    return now.isoformat(timespec="seconds")

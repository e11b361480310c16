"""Simple config persistence for the realtime NTP clock."""
import json
import logging
import os
from typing import Dict

logger = logging.getLogger(__name__)

_CONFIG_PATH = os.path.expanduser("~/.realtime_config.json")

DEFAULTS = {
    "ntp_server": "pool.ntp.org",
    "ntp_timeout_s": 3.0,
    "ntp_port": 123,
}


def load_config() -> Dict:
    if os.path.exists(_CONFIG_PATH):
        try:
            with open(_CONFIG_PATH, "r") as f:
                cfg = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("config: ignoring unreadable %s: %s", _CONFIG_PATH, e)
            return {}
        if not isinstance(cfg, dict):
            logger.warning("config: ignoring %s, top level is not an object", _CONFIG_PATH)
            return {}
        return cfg
    return {}


def save_config(cfg: Dict) -> None:
    d = os.path.dirname(_CONFIG_PATH)
    if d and not os.path.exists(d):
        os.makedirs(d, exist_ok=True)
    with open(_CONFIG_PATH, "w") as f:
        json.dump(cfg, f, indent=2)

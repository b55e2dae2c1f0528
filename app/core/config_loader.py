import json
import os
import re
from typing import Dict, Any, List, Optional

from app.core.config import settings
from app.core.logger import logger

DEFAULT_CUTOFF = "16:00"
SLOT_PATTERN = re.compile(r"^([01][0-9]|2[0-3]):[0-5][0-9]$")

def load_company_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Loads company configuration (time catalog, same-day cutoff, notifications) from JSON.
    Raises FileNotFoundError if the file is missing, ValueError if it is not valid JSON
    or the time catalog is malformed.
    """
    path = path or settings.COMPANY_CONFIG_PATH

    if not os.path.exists(path):
        logger.critical(f"❌ Company config '{path}' not found, cannot start.")
        raise FileNotFoundError(f"Configuration file not found at {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            config = json.load(f)
    except json.JSONDecodeError as e:
        logger.critical(f"❌ Invalid JSON in company config: {e}")
        raise ValueError(f"Invalid JSON in config file: {e}")

    slots = config.get("time_slots")
    if not slots or not all(isinstance(s, str) and SLOT_PATTERN.match(s) for s in slots):
        logger.critical(f"❌ 'time_slots' in {path} must be a non-empty list of HH:MM strings")
        raise ValueError("time_slots must be a non-empty list of HH:MM strings")

    cutoff = config.get("same_day_cutoff")
    if cutoff is not None and not (isinstance(cutoff, str) and SLOT_PATTERN.match(cutoff)):
        logger.critical(f"❌ 'same_day_cutoff' in {path} must be an HH:MM string, got {cutoff!r}")
        raise ValueError("same_day_cutoff must be an HH:MM string")

    logger.info(f"✅ Company config loaded for: {config.get('company_name', 'Unknown')} ({len(slots)} slots)")
    return config

def get_time_slots(config: Dict[str, Any]) -> List[str]:
    """The Time Catalog, in the order it is offered to visitors."""
    return list(config["time_slots"])

def get_same_day_cutoff(config: Dict[str, Any]) -> str:
    """Latest HH:MM at which a booking for the same day is still accepted."""
    return config.get("same_day_cutoff") or DEFAULT_CUTOFF

def get_notification_config(config: Dict[str, Any]) -> Dict[str, Any]:
    return config.get("notifications", {})

import copy
import logging
import os

import yaml
from limits import parse_many

from retrodex.constants import CONFIG_FILE, DEFAULT_SETTINGS

# Retrieve main logger
logger = logging.getLogger("main")


# Cache variable
_cached_settings = None


def _merge_with_defaults(settings):
    merged_settings = copy.deepcopy(DEFAULT_SETTINGS)
    for section, values in settings.items():
        if isinstance(values, dict) and isinstance(merged_settings.get(section), dict):
            merged_settings[section].update(values)
        else:
            merged_settings[section] = values
    return merged_settings


def _write_settings(settings, config_file=CONFIG_FILE):
    os.makedirs(os.path.dirname(config_file), exist_ok=True)
    with open(config_file, "w") as yaml_file:
        yaml.dump(settings, yaml_file)


def load_settings(force=False, config_file=CONFIG_FILE):
    global _cached_settings

    if _cached_settings and not force:
        return _cached_settings

    if os.path.exists(config_file):
        logger.debug(f"Reading configuration file: {config_file}")
        with open(config_file, "r") as yaml_file:
            settings = yaml.safe_load(yaml_file) or {}

        # Deep merge with defaults so new keys are always present
        settings = _merge_with_defaults(settings)
    else:
        settings = copy.deepcopy(DEFAULT_SETTINGS)
        try:
            _write_settings(settings, config_file)
        except OSError as e:
            logger.warning(f"Could not write default configuration to {config_file}: {e}")

    _cached_settings = settings
    return settings


def _is_positive_int(value):
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _is_rate_limit(value):
    if not isinstance(value, str):
        return False
    try:
        return bool(parse_many(value))
    except ValueError:
        return False


def verify_settings(section, data):
    success = True
    errors = []
    if section not in DEFAULT_SETTINGS:
        return False, [{"path": section, "error": f"Unknown settings section {section}."}]

    if section in ("site", "search", "catalog"):
        int_keys = [key for key, value in DEFAULT_SETTINGS[section].items() if isinstance(value, int)]
        for key in int_keys:
            if key in data and not _is_positive_int(data[key]):
                success = False
                errors.append({"path": f"{section}/{key}", "error": f"{key} must be a positive integer."})
        for key in data:
            if key not in DEFAULT_SETTINGS[section]:
                success = False
                errors.append({"path": f"{section}/{key}", "error": f"Unknown setting {key}."})
    elif section == "ratelimit":
        if "default" in data:
            limits = data["default"]
            if not isinstance(limits, list) or not limits or not all(_is_rate_limit(limit) for limit in limits):
                success = False
                errors.append(
                    {"path": "ratelimit/default", "error": "default must be a list of limits like '100 per hour'."}
                )
        if "search" in data and not _is_rate_limit(data["search"]):
            success = False
            errors.append({"path": "ratelimit/search", "error": "search must be a limit like '30 per minute'."})
        for key in data:
            if key not in DEFAULT_SETTINGS["ratelimit"]:
                success = False
                errors.append({"path": f"ratelimit/{key}", "error": f"Unknown setting {key}."})
    return success, errors


def set_settings_section(section, data, config_file=CONFIG_FILE):
    success, errors = verify_settings(section, data)
    if not success:
        return success, errors

    settings = load_settings()
    settings.setdefault(section, {}).update(data)
    _write_settings(settings, config_file)
    reload_conf(config_file)
    return success, errors


def set_admin_token(token, config_file=CONFIG_FILE):
    settings = load_settings()
    settings["admin"]["api_token"] = token or ""
    _write_settings(settings, config_file)
    reload_conf(config_file)


def reload_conf(config_file=CONFIG_FILE):
    """Reload application settings cache"""
    global _cached_settings
    _cached_settings = None
    return load_settings(force=True, config_file=config_file)

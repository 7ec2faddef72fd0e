import json
import logging
import os
import re
import uuid
from datetime import date, datetime, timezone

_SLUG_INVALID_RUN = re.compile(r"[^a-z0-9]+")
_TRUTHY = {"1", "true", "yes", "on"}


# Custom logging formatter to support colors
class ColoredFormatter(logging.Formatter):
    # Define color codes
    COLORS = {
        'DEBUG': '\033[94m',   # Blue
        'INFO': '\033[92m',    # Green
        'WARNING': '\033[93m', # Yellow
        'ERROR': '\033[91m',   # Red
        'CRITICAL': '\033[95m' # Magenta
    }
    RESET = '\033[0m'  # Reset color

    def format(self, record):
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.RESET}"

        return super().format(record)


# Filter to remove date from http access logs
class FilterRemoveDateFromWerkzeugLogs(logging.Filter):
    # '192.168.0.102 - - [30/Jun/2024 01:14:03] "%s" %s %s' -> '192.168.0.102 - "%s" %s %s'
    pattern: re.Pattern = re.compile(r' - - \[.+?] "')

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = self.pattern.sub(' - "', record.msg)
        return True


def get_or_create_secret_key():
    """
    Generate or load a persistent secret key for Flask sessions.
    The key is stored in CONFIG_DIR/.secret_key with restricted permissions.

    Returns:
        str: 64-character hex secret key
    """
    import secrets
    from retrodex.constants import CONFIG_DIR

    logger = logging.getLogger('main')
    secret_key_file = os.path.join(CONFIG_DIR, '.secret_key')

    if os.path.exists(secret_key_file):
        try:
            with open(secret_key_file, 'r') as f:
                key = f.read().strip()
                if len(key) == 64:
                    return key
                logger.warning("Invalid secret key found, generating new one")
        except OSError as e:
            logger.error(f"Error reading secret key: {e}")

    key = secrets.token_hex(32)  # 32 bytes = 64 hex chars

    try:
        os.makedirs(CONFIG_DIR, exist_ok=True)
        with open(secret_key_file, 'w') as f:
            f.write(key)
        os.chmod(secret_key_file, 0o600)
        logger.info("Generated new secret key and saved to disk")
    except OSError as e:
        logger.error(f"Error saving secret key: {e}")
        logger.warning("Using non-persistent secret key")

    return key


def sanitize_sensitive_data(data, sensitive_keys=None):
    """
    Remove or mask sensitive data before logging.

    Args:
        data: Dictionary, list, or other data to sanitize
        sensitive_keys: List of keys to mask (default: common sensitive keys)

    Returns:
        Sanitized version of the data
    """
    if sensitive_keys is None:
        sensitive_keys = [
            'password', 'passwd', 'pwd',
            'secret', 'secret_key', 'api_key', 'apikey',
            'token', 'access_token', 'refresh_token',
            'private_key', 'session',
            'authorization', 'auth',
        ]

    if isinstance(data, dict):
        sanitized = {}
        for k, v in data.items():
            key_lower = str(k).lower()
            if any(sens in key_lower for sens in sensitive_keys):
                if isinstance(v, str) and len(v) > 4:
                    sanitized[k] = f"{v[:2]}***{v[-2:]}"
                else:
                    sanitized[k] = "***"
            elif isinstance(v, (dict, list)):
                sanitized[k] = sanitize_sensitive_data(v, sensitive_keys)
            else:
                sanitized[k] = v
        return sanitized

    elif isinstance(data, list):
        return [sanitize_sensitive_data(item, sensitive_keys) if isinstance(item, (dict, list)) else item for item in data]

    return data


def now_utc():
    """Returns current datetime in UTC (aware)"""
    return datetime.now(timezone.utc)


def new_uuid():
    return str(uuid.uuid4())


def isoformat(value):
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def slugify(name):
    """
    Derive a URL-safe slug from a human readable name.

    Lowercases, collapses every run of characters outside [a-z0-9] into a
    single hyphen and strips leading/trailing hyphens:

        >>> slugify("Anbernic RG35XX Plus!")
        'anbernic-rg35xx-plus'
    """
    if name is None:
        return ""
    return _SLUG_INVALID_RUN.sub("-", str(name).lower()).strip("-")


def clean_text(value):
    """Strip strings, turning blank values into None."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_bool(value):
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in _TRUTHY


def parse_int(value, default=None):
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default


def parse_float(value, default=None):
    if value is None or isinstance(value, bool):
        return default
    try:
        return float(str(value).strip())
    except (TypeError, ValueError):
        return default


def _clean_items(items):
    cleaned = []
    for item in items:
        if item is None:
            continue
        text = str(item).strip()
        if text:
            cleaned.append(text)
    return cleaned


def parse_list_field(value):
    """
    Parse an array form field into a list of strings.

    Accepts a list, a JSON encoded list or a comma separated string. When the
    text is not valid JSON (or not a JSON list) it silently falls back to a
    comma split. Elements are trimmed and empty ones dropped.
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        return _clean_items(value)

    text = str(value).strip()
    if not text:
        return []

    try:
        decoded = json.loads(text)
    except (TypeError, ValueError):
        decoded = None

    if isinstance(decoded, list):
        return _clean_items(decoded)
    return _clean_items(text.split(","))


def format_list_field(items):
    """Render an array column back into its comma separated form value."""
    if not items:
        return ""
    return ", ".join(str(item) for item in items)


def escape_like(value):
    """Escape LIKE wildcards so user input matches literally (escape char is a backslash)."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")

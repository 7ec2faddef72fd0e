"""
Request rate limiting
"""
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from retrodex.settings import load_settings


def default_limit():
    """Configured default limits, e.g. "300 per day; 100 per hour" """
    return "; ".join(load_settings()['ratelimit']['default'])


def search_limit():
    return load_settings()['ratelimit']['search']


limiter = Limiter(key_func=get_remote_address, default_limits=[default_limit])

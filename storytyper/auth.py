"""API key lookup for the story providers."""

import os
import json
import getpass
import logging
from datetime import datetime, timedelta

from wasabi import Printer

from .config import KEY_CACHE, CACHE_DAYS, StoryTyperError


logger = logging.getLogger(__name__)
msg = Printer()

# provider name -> environment variable
KEY_ENV = {
    "claude": "ANTHROPIC_API_KEY",
    "openai": "OPENAI_API_KEY",
}


class MissingApiKeyError(StoryTyperError):
    pass


def _read_cache(cache_file):
    try:
        with open(cache_file) as f:
            return json.load(f)
    except (OSError, ValueError):
        return {}


def get_cached_key(provider, cache_file=KEY_CACHE):
    entry = _read_cache(cache_file).get(provider)
    if not isinstance(entry, dict):
        return None
    try:
        ts = datetime.fromisoformat(entry["timestamp"])
    except (KeyError, TypeError, ValueError):
        return None
    if datetime.now() - ts < timedelta(days=CACHE_DAYS):
        return entry.get("api_key")
    return None


def cache_key(provider, key, cache_file=KEY_CACHE):
    os.makedirs(os.path.dirname(cache_file), exist_ok=True)
    data = _read_cache(cache_file)
    data[provider] = {"api_key": key, "timestamp": datetime.now().isoformat()}
    with open(cache_file, "w") as f:
        json.dump(data, f)
    os.chmod(cache_file, 0o600)


def get_api_key(provider, cache_file=KEY_CACHE, prompt=getpass.getpass):
    """Environment first, then the cache, then ask on the console.

    Must run before curses takes over the terminal.
    """
    token = os.getenv(KEY_ENV[provider])
    if token:
        logger.debug(f"🔑 Using {provider} API key from {KEY_ENV[provider]}")
        return token

    token = get_cached_key(provider, cache_file)
    if token:
        logger.debug(f"🔑 Using cached {provider} API key")
        return token

    token = prompt(f"🔑 {provider.title()} API key: ").strip()
    if not token:
        msg.fail(f"No {provider} API key provided")
        raise MissingApiKeyError(f"No {provider} API key provided (set {KEY_ENV[provider]})")
    cache_key(provider, token, cache_file)
    msg.good(f"Cached {provider} API key for {CACHE_DAYS} days")
    return token

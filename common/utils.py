# -*- coding: utf-8 -*-
"""
================================================================================
Common Utility Functions
================================================================================
Purpose:
----------------
This module holds the pieces every command shares: reading settings and
configuring logging. Settings live in a plain `settings.txt` file in the
working directory, one `KEY=VALUE` per line:

    MIRAKL_BASE_URL=https://marketplace.bestbuy.ca
    MIRAKL_API_KEY=xxxxxxxx-xxxx-xxxx-xxxx-xxxxxxxxxxxx
    ORDER_STATE_CODES=WAITING_ACCEPTANCE,SHIPPING
    ORDER_PATH=orders

An environment variable with the same name always wins over the file, which
keeps credentials out of the file on machines that inject them.

Key Functions:
- `get_setting(key_name)`: environment first, then the settings file.
- `load_settings()`: reads and validates everything a command needs, once.
- `setup_logging()`: console plus append-only log file.
----------------
"""

# =====================================================================================
# --- Imports and Configuration ---
# =====================================================================================
import os
import sys
import logging

from common.exceptions import ConfigurationError

APP_NAME = "marketplace-order-sync"
APP_VERSION = "0.1.0"
USER_AGENT = f"{APP_NAME}/{APP_VERSION}"

# The settings file path can be moved with an environment variable, e.g. when the
# tool runs from a scheduler whose working directory is not the project root.
SETTINGS_FILE = os.getenv("ORDER_SYNC_SETTINGS_FILE", "settings.txt")
DEFAULT_ORDER_PATH = "orders"

LOG_FILE = os.getenv("ORDER_SYNC_LOG_FILE", "order_sync.log")
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'

logger = logging.getLogger(__name__)


# =====================================================================================
# --- Settings ---
# =====================================================================================

def get_setting(key_name, settings_file=None):
    """
    Reads a single setting.

    The environment is checked first. Otherwise the settings file is read line
    by line and the value after the first '=' of the matching line is returned.

    Args:
        key_name (str): The name of the key to retrieve (e.g. "MIRAKL_API_KEY").
        settings_file (str): Optional path overriding SETTINGS_FILE.

    Returns:
        str or None: The value with surrounding whitespace removed, or None when
        the key is set nowhere.
    """
    value = os.getenv(key_name)
    if value is not None:
        return value.strip()

    settings_file = settings_file or SETTINGS_FILE
    try:
        with open(settings_file, 'r') as f:
            for line in f:
                if line.startswith(key_name + '='):
                    return line.strip().split('=', 1)[1].strip()
    except FileNotFoundError:
        logger.debug(f"Settings file {settings_file} not found, relying on the environment.")
    return None


def get_order_state_codes(settings_file=None):
    """
    Returns the configured order state codes as a list, in configuration order.

    Blank entries (e.g. a trailing comma) are dropped.
    """
    raw = get_setting('ORDER_STATE_CODES', settings_file)
    if not raw:
        return []
    return [code.strip() for code in raw.split(',') if code.strip()]


def load_settings(settings_file=None):
    """
    Loads and validates every setting a command needs.

    Returns:
        dict: `base_url` (no trailing slash), `api_key`, `order_state_codes`
        (non-empty list) and `order_path`.

    Raises:
        ConfigurationError: if a required key is missing.
    """
    settings_file = settings_file or SETTINGS_FILE

    base_url = get_setting('MIRAKL_BASE_URL', settings_file)
    api_key = get_setting('MIRAKL_API_KEY', settings_file)
    order_state_codes = get_order_state_codes(settings_file)
    order_path = get_setting('ORDER_PATH', settings_file) or DEFAULT_ORDER_PATH

    if not base_url:
        raise ConfigurationError('MIRAKL_BASE_URL', settings_file)
    if not api_key:
        raise ConfigurationError('MIRAKL_API_KEY', settings_file)
    if not order_state_codes:
        raise ConfigurationError('ORDER_STATE_CODES', settings_file)

    return {
        'base_url': base_url.rstrip('/'),
        'api_key': api_key,
        'order_state_codes': order_state_codes,
        'order_path': order_path,
    }


# =====================================================================================
# --- Logging ---
# =====================================================================================

def setup_logging(log_file=None, level=None):
    """
    Sends log records both to stdout and to an append-only log file.

    The level comes from the LOG_LEVEL environment variable unless given
    explicitly, and defaults to INFO.
    """
    level = level or os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[
            logging.FileHandler(log_file or LOG_FILE, mode='a'),
            logging.StreamHandler(sys.stdout)
        ]
    )
    # dicttoxml logs every call at INFO.
    logging.getLogger("dicttoxml").setLevel(logging.WARNING)
    return logging.getLogger()

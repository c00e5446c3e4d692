# Configuration settings should be set in app.config or passed to SAJA(app, **kwargs)
# The get_config function looks up the option in the app config, the SAJA class defaults and the environment
import os
import logging
from flask import current_app
import saja
from typing import Any


def get_config(option: str, default: Any = None) -> Any:
    """Retrieve a configuration parameter from the app
    :param option: configuration parameter
    :param default: value returned when the option isn't set anywhere
    :return: configuration value
    """
    try:
        result = current_app.config[option]
    except (KeyError, RuntimeError):
        # RuntimeError: working outside of application context
        result = getattr(saja.SAJA, option, None)
        if result is None:
            result = os.environ.get(option, None)
    if result is None:
        return default
    return result


def is_debug() -> bool:
    """
    We use the loglevel to check whether we're running in debug mode
    :return: whether the app is in debug mode
    :rtype: Boolean
    """
    return saja.log.getEffectiveLevel() < logging.INFO

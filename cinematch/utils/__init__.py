"""Utility modules for the CineMatch recommender."""

from cinematch.utils.config import CONFIG_PATH, load_config
from cinematch.utils.logger import (
    get_logger,
    console,
    log_header,
    log_config,
    log_recommendations_table,
    log_success,
    log_warning,
    log_error,
)

__all__ = [
    "CONFIG_PATH",
    "load_config",
    "get_logger",
    "console",
    "log_header",
    "log_config",
    "log_recommendations_table",
    "log_success",
    "log_warning",
    "log_error",
]

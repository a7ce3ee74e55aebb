"""Utility modules for configuration, logging, sharing and export."""

from .config import load_config, get_config
from .logger import get_logger
from .share import build_share_url, mission_from_query

__all__ = [
    "load_config",
    "get_config",
    "get_logger",
    "build_share_url",
    "mission_from_query",
]

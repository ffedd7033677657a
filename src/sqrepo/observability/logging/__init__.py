"""Observability – structured logging helpers."""
from sqrepo.observability.logging.factory import JsonLoggerFactory
from sqrepo.observability.logging.processors import get_logger

__all__ = ["JsonLoggerFactory", "get_logger"]

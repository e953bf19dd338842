"""
Logging configuration and utilities for the points exchange workflow.
"""
from .config import configure_logging, get_logger, get_workflow_logger

__all__ = ["configure_logging", "get_logger", "get_workflow_logger"]

"""
Structured logging for Backend EventWatch.

JSON logs with timestamp, event_type and module name.
Use get_logger() in all watcher modules for aggregation-friendly output.
"""

from backend_eventwatch.eventwatch_logging.logger import bind_subscription, get_logger

__all__ = ["bind_subscription", "get_logger"]

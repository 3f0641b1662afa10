"""Core utilities, configuration and error types."""

from codel_sms.core.config import settings, get_settings, Settings
from codel_sms.core.observability import (
    get_logger,
    MetricsCollector,
    init_observability,
    trace_operation,
    monitor_performance,
)

__all__ = [
    "settings",
    "get_settings",
    "Settings",
    "get_logger",
    "MetricsCollector",
    "init_observability",
    "trace_operation",
    "monitor_performance",
]

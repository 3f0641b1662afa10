"""
Observability module providing structured logging, metrics collection, and tracing.
"""

import logging
import time
from typing import Callable, Optional
from functools import wraps
from contextlib import contextmanager
import structlog
from prometheus_client import Counter, Histogram, CollectorRegistry, generate_latest
from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider

from codel_sms.core.config import settings
from codel_sms.core.exceptions import GatewayError, SmsError


# Initialize structured logging
def setup_logging():
    """Configure structured logging on top of the standard library."""

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if settings.log_format == "json" else structlog.dev.ConsoleRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, settings.log_level.upper())
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


# Metrics Registry
registry = CollectorRegistry()

message_counter = Counter(
    'sms_messages_total',
    'Total number of messages handed to the gateway',
    ['mode', 'status'],
    registry=registry
)

planning_failures = Counter(
    'sms_planning_failures_total',
    'Send calls rejected before reaching the gateway',
    ['error'],
    registry=registry
)

gateway_duration = Histogram(
    'sms_gateway_request_duration_seconds',
    'Gateway request duration',
    ['endpoint'],
    registry=registry
)

gateway_errors = Counter(
    'sms_gateway_errors_total',
    'Gateway transport errors',
    ['endpoint', 'error_type'],
    registry=registry
)


class MetricsCollector:
    """
    Collects and exposes client metrics.

    Each tracking call takes an optional `enabled` flag so a client built
    with its own Settings can switch metrics off; without it the
    environment's `metrics_enabled` applies.
    """

    @staticmethod
    def _enabled(enabled: Optional[bool]) -> bool:
        return settings.metrics_enabled if enabled is None else enabled

    @staticmethod
    def track_messages(mode: str, status: str, count: int = 1, enabled: Optional[bool] = None):
        """Track messages dispatched in a single or batch request."""
        if not MetricsCollector._enabled(enabled):
            return
        message_counter.labels(mode=mode, status=status).inc(count)

    @staticmethod
    def track_planning_failure(error: str, enabled: Optional[bool] = None):
        if not MetricsCollector._enabled(enabled):
            return
        planning_failures.labels(error=error).inc()

    @staticmethod
    @contextmanager
    def track_duration(endpoint: str, enabled: Optional[bool] = None):
        """Track gateway request duration."""
        start = time.time()
        try:
            yield
        finally:
            if MetricsCollector._enabled(enabled):
                gateway_duration.labels(endpoint=endpoint).observe(time.time() - start)

    @staticmethod
    def track_gateway_error(endpoint: str, error_type: str, enabled: Optional[bool] = None):
        if not MetricsCollector._enabled(enabled):
            return
        gateway_errors.labels(endpoint=endpoint, error_type=error_type).inc()

    @staticmethod
    def get_metrics() -> bytes:
        """Get metrics in Prometheus format."""
        return generate_latest(registry)


# Tracing Setup
tracer = None


def setup_tracing():
    """Configure OpenTelemetry tracing."""
    global tracer

    if not settings.tracing_enabled:
        return

    resource = Resource.create({
        "service.name": "codel-sms",
        "service.version": settings.app_version,
        "deployment.environment": settings.environment,
    })

    provider = TracerProvider(resource=resource)
    trace.set_tracer_provider(provider)

    tracer = trace.get_tracer(__name__)


def trace_operation(name: str):
    """Decorator to trace function execution."""
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            if not tracer:
                return func(*args, **kwargs)

            with tracer.start_as_current_span(name) as span:
                try:
                    span.set_attribute("function.name", func.__name__)
                    result = func(*args, **kwargs)
                    span.set_status(trace.Status(trace.StatusCode.OK))
                    return result
                except Exception as e:
                    span.set_status(
                        trace.Status(trace.StatusCode.ERROR, str(e))
                    )
                    span.record_exception(e)
                    raise

        return wrapper

    return decorator


def monitor_performance(operation_name: str):
    """
    Decorator to monitor function performance.

    Rejected input (an SmsError other than GatewayError) is logged as a
    warning with its kind; any other failure is logged as an error.
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            logger = get_logger(__name__)
            start_time = time.time()

            try:
                result = func(*args, **kwargs)
            except SmsError as e:
                rejected = not isinstance(e, GatewayError)
                log = logger.warning if rejected else logger.error
                log(
                    f"{operation_name} failed",
                    operation=operation_name,
                    duration=time.time() - start_time,
                    status="rejected" if rejected else "error",
                    error_type=type(e).__name__,
                    error=e.kind,
                    reason=e.message,
                    details=e.details
                )
                raise
            except Exception as e:
                logger.error(
                    f"{operation_name} failed",
                    operation=operation_name,
                    duration=time.time() - start_time,
                    status="error",
                    error_type=type(e).__name__,
                    error=str(e)
                )
                raise

            logger.info(
                f"{operation_name} completed",
                operation=operation_name,
                duration=time.time() - start_time,
                status="success"
            )
            return result

        return wrapper

    return decorator


def init_observability():
    """Initialize all observability components."""
    setup_logging()
    setup_tracing()

    logger = get_logger(__name__)
    logger.info(
        "Observability initialized",
        metrics_enabled=settings.metrics_enabled,
        tracing_enabled=settings.tracing_enabled,
        log_level=settings.log_level
    )

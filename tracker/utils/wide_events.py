"""
Operation events for EVC Track.

Every write against a store produces one JSON log line describing what
happened: the operation, the storage mode, the record ids touched, timings
and, on failure, the error code. Successful fast reads are sampled; failures,
slow operations and data-changing events are always kept.
"""

import random
import time
import uuid
from contextlib import contextmanager
from typing import Any, Dict, Optional

import structlog

from utils.time_utils import utc_now

SERVICE_NAME = "evc-track"

# Events that change what the user sees are never sampled away
CRITICAL_EVENTS = (
    "session_started",
    "session_completed",
    "record_deleted",
    "profile_saved",
)


def configure_logging() -> None:
    """Route structlog through stdlib logging with JSON rendering."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class WideEvent:
    """
    One log line per operation, filled in as the operation runs.

    Usage:
        event = WideEvent("charging_complete", trace_id=owner_id)
        event.add_context(mode="authenticated", charging_session_id=session_id)
        with event.timer("store_write"):
            store.update_session(session_id, fields)
        event.add_business_metric("session_completed", True)
        event.emit()
    """

    def __init__(self, operation: str, request_id: Optional[str] = None, trace_id: Optional[str] = None):
        self.operation = operation
        self.started = time.time()
        self.context: Dict[str, Any] = {
            "service": SERVICE_NAME,
            "operation": operation,
            "timestamp": utc_now().isoformat(),
            "start_time": self.started,
            "request_id": request_id or uuid.uuid4().hex,
        }
        if trace_id:
            self.context["trace_id"] = trace_id
        self.logger = structlog.get_logger("evc_track.events")

    def _section(self, name: str) -> Dict[str, Any]:
        return self.context.setdefault(name, {})

    def add_context(self, **fields) -> "WideEvent":
        self.context.update(fields)
        return self

    def add_business_metric(self, key: str, value: Any) -> "WideEvent":
        """Domain numbers: kWh, cost, record counts, lifecycle flags."""
        self._section("business_metrics")[key] = value
        return self

    def add_technical_metric(self, key: str, value: Any) -> "WideEvent":
        self._section("technical_metrics")[key] = value
        return self

    def add_error(self, error: Exception, **details) -> "WideEvent":
        """Record an exception; application errors also contribute their code."""
        entry = {
            "type": type(error).__name__,
            "message": getattr(error, "message", str(error)),
            "details": details,
        }
        if hasattr(error, "error_code"):
            entry["code"] = error.to_dict()["code"]
        self.context["error"] = entry
        self.context["success"] = False
        return self

    def mark_success(self) -> "WideEvent":
        self.context["success"] = True
        return self

    def mark_failure(self, reason: str) -> "WideEvent":
        self.context.update(success=False, failure_reason=reason)
        return self

    @contextmanager
    def timer(self, step: str):
        """Time one step; stored as ``performance_breakdown[<step>_ms]``."""
        began = time.time()
        try:
            yield
        finally:
            self._section("performance_breakdown")[f"{step}_ms"] = round((time.time() - began) * 1000, 2)

    def set_duration(self) -> "WideEvent":
        if self.context.pop("start_time", None) is not None:
            self.context["duration_ms"] = round((time.time() - self.started) * 1000, 2)
        return self

    def should_emit(self, sample_rate: float = 0.05, slow_threshold_ms: float = 1000) -> bool:
        if self.context.get("success") is False:
            return True
        if self.context.get("duration_ms", 0) > slow_threshold_ms:
            return True
        metrics = self.context.get("business_metrics", {})
        if any(metrics.get(name) for name in CRITICAL_EVENTS):
            return True
        return random.random() < sample_rate

    def emit(self, level: str = "info", force: bool = False) -> None:
        """Write the event, unless sampling drops it and ``force`` is off."""
        self.set_duration()
        if force or self.should_emit():
            getattr(self.logger, level, self.logger.info)(f"{self.operation}_complete", **self.context)


@contextmanager
def track_operation(operation: str, **initial_context):
    """
    Wrap a store operation in a WideEvent that is always emitted.

    Exceptions are recorded on the event and re-raised unchanged, so the
    Flask error handlers still shape the HTTP response.

    Usage:
        with track_operation("expense_add", mode=state.mode) as event:
            expense = expense_service.add_expense(state.store, payload)
            event.add_context(expense_id=expense["id"])
    """
    event = WideEvent(operation).add_context(**initial_context)
    try:
        yield event
    except Exception as e:
        event.add_error(e)
        event.mark_failure(getattr(e, "message", str(e)))
        raise
    else:
        event.mark_success()
    finally:
        event.emit(level="info" if event.context.get("success") else "error", force=True)


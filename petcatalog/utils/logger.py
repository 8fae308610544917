"""
Structured logging utility for the Pet Catalog extraction service.
Provides structured parse-decision logs with trace IDs for debugging.
"""
import uuid
import logging
import structlog
from contextvars import ContextVar
from typing import Any, Dict, List, Optional

from petcatalog.config import config

# Context variable for trace ID
trace_id_var: ContextVar[str] = ContextVar("trace_id", default="")


def get_trace_id() -> str:
    """Get current trace ID or generate new one."""
    trace_id = trace_id_var.get()
    if not trace_id:
        trace_id = str(uuid.uuid4())[:8]
        trace_id_var.set(trace_id)
    return trace_id


def set_trace_id(trace_id: Optional[str] = None) -> str:
    """Set a new trace ID for the current context."""
    new_trace_id = trace_id or str(uuid.uuid4())[:8]
    trace_id_var.set(new_trace_id)
    return new_trace_id


def add_trace_id(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Processor to add trace ID to all log entries."""
    event_dict["trace_id"] = get_trace_id()
    return event_dict


def configure_logging():
    """Configure structlog with appropriate processors."""
    processors = [
        structlog.contextvars.merge_contextvars,
        add_trace_id,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if config.LOG_FORMAT == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, config.LOG_LEVEL.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a logger instance with the given name."""
    return structlog.get_logger(name)


class ParserLogger:
    """
    Decision trace for extractors and layers.

    Every extractor receives one of these in its constructor, so callers
    can route or capture parse decisions (which strategy matched, what was
    skipped) without the extractor knowing the logging backend.
    """

    def __init__(self, component: str):
        self.component = component
        self.logger = get_logger(component)

    def log_strategy(
        self,
        target: str,
        strategy: str,
        matched: bool,
        **extra
    ):
        """Log the outcome of one extraction strategy."""
        self.logger.debug(
            "strategy_evaluated",
            component=self.component,
            target=target,
            strategy=strategy,
            matched=matched,
            **extra
        )

    def log_skip(
        self,
        item: str,
        reason: str,
        **extra
    ):
        """Log an element or value that was skipped."""
        self.logger.warning(
            "item_skipped",
            component=self.component,
            item=item,
            reason=reason,
            **extra
        )

    def log_decision(
        self,
        decision: str,
        reason: str,
        **extra
    ):
        """Log a decision made by this component."""
        self.logger.info(
            "decision_made",
            component=self.component,
            decision=decision,
            reason=reason,
            **extra
        )

    def log_action(
        self,
        action: str,
        status: str = "started",
        **extra
    ):
        """Log an action being performed."""
        self.logger.info(
            f"action_{status}",
            component=self.component,
            action=action,
            **extra
        )

    def log_fallback(
        self,
        from_source: str,
        to_source: str,
        reason: str,
        **extra
    ):
        """Log a fallback from one selector or source to another."""
        self.logger.warning(
            "fallback_triggered",
            component=self.component,
            from_source=from_source,
            to_source=to_source,
            reason=reason,
            **extra
        )

    def log_error(
        self,
        error: str,
        error_type: str = "unknown",
        **extra
    ):
        """Log an error with full context."""
        self.logger.error(
            "error_occurred",
            component=self.component,
            error=error,
            error_type=error_type,
            **extra
        )

    def log_extraction(
        self,
        fields_present: List[str],
        fields_missing: List[str],
        confidence: Dict[str, float],
        **extra
    ):
        """Log a finished attribute extraction."""
        self.logger.info(
            "attributes_extracted",
            component=self.component,
            fields_present=fields_present,
            fields_missing=fields_missing,
            confidence=confidence,
            **extra
        )


# Initialize logging on module import
configure_logging()

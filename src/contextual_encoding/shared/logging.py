"""Stream-scoped logging for contextual encoding.

Every record names the component that emitted it and, when one is known, the
output stream being written. Writers draw a short id per stream, so the trail
of one response (encoders selected, URLs flushed, text regions closed) can be
followed through a log shared by many streams.
"""

import logging
import uuid
from typing import Any, Dict, Optional


def new_stream_id() -> str:
    """Short random id naming one output stream."""
    return str(uuid.uuid4())[:8]


class CorrelationLogger:
    """Logger adding the component and stream id to every record.

    Attributes:
        logger: Underlying standard library logger
        correlation_id: Id of the output stream, or None outside any stream
        component: Layer emitting the records
    """

    def __init__(
        self,
        name: str,
        correlation_id: Optional[str] = None,
        component: Optional[str] = None
    ) -> None:
        self.logger = logging.getLogger(name)
        self.correlation_id = correlation_id
        self.component = component or name.rsplit(".", 1)[-1]

    def for_stream(self, correlation_id: Optional[str]) -> "CorrelationLogger":
        """The same logger, bound to the stream ``correlation_id``."""
        if correlation_id == self.correlation_id:
            return self
        return CorrelationLogger(self.logger.name, correlation_id, self.component)

    def _extra(self, extra: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        combined = {"component": self.component, "correlation_id": self.correlation_id}
        if extra:
            combined.update(extra)
        return combined

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self.logger.debug(message, extra=self._extra(extra))

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self.logger.warning(message, extra=self._extra(extra))

    def error(
        self,
        message: str,
        extra: Optional[Dict[str, Any]] = None,
        exc_info: bool = True
    ) -> None:
        """Log an error; the exception being handled is attached by default."""
        self.logger.error(message, extra=self._extra(extra), exc_info=exc_info)


def get_logger(
    name: str,
    correlation_id: Optional[str] = None,
    component: Optional[str] = None
) -> CorrelationLogger:
    """Get a logger for module ``name``.

    Args:
        name: Logger name (typically __name__)
        correlation_id: Stream id, None for module-level loggers
        component: Layer name; the last part of ``name`` when omitted
    """
    return CorrelationLogger(name, correlation_id, component)

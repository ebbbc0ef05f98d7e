"""
Logging infrastructure.

Process-level logging setup and the correlation-id adapter used by
the webhook path.
"""
import logging


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: int = logging.INFO) -> None:
    """Root logging config for the API process."""
    logging.basicConfig(level=level, format=LOG_FORMAT)


class CorrelationAdapter(logging.LoggerAdapter):
    """Prefixes every message with the request's correlation id."""

    def process(self, msg, kwargs):
        return f"[{self.extra['correlation_id']}] {msg}", kwargs


def correlated(logger: logging.Logger, correlation_id: str) -> CorrelationAdapter:
    """
    Wrap a module logger for one request.

    Args:
        logger: Module logger
        correlation_id: Id returned to the sender as errorId

    Returns:
        LoggerAdapter that tags every line with the id
    """
    return CorrelationAdapter(logger, {"correlation_id": correlation_id})

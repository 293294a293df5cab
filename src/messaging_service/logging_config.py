from __future__ import annotations

import logging

from messaging_service.api.middleware.correlation_id import CorrelationIdFilter

LOG_FORMAT = "%(asctime)s %(levelname)s [%(request_id)s] %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Root logging for the service process, tagging records with the request id."""
    handler = logging.StreamHandler()
    handler.addFilter(CorrelationIdFilter())
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, handlers=[handler], force=True)

"""Console logging for the gitle CLI."""

import logging
import sys

from gitle.process import redact

logger = logging.getLogger("gitle")


class RedactCredentials(logging.Filter):
    """Mask credentials embedded in URLs before a record is emitted."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = redact(message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True


def configure_logging(debug: bool):
    """
    Set the level of the `gitle` logger and make sure its output is redacted.

    A stdout handler is added when no handler is configured yet. Every handler
    of the `gitle` logger gets the RedactCredentials filter, so no message
    from any gitle module prints a token or password.
    """
    logger.setLevel(logging.DEBUG if debug else logging.INFO)

    if not logger.hasHandlers():
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)

    for handler in logger.handlers:
        if not any(isinstance(f, RedactCredentials) for f in handler.filters):
            handler.addFilter(RedactCredentials())

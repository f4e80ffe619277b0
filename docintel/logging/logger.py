import logging
import re
import sys

_SECRET_PATTERNS = (
    re.compile(r"(Bearer\s+)[A-Za-z0-9._~+/=-]+"),
    re.compile(r"""(["']?(?:access_token|client_secret|api_key)["']?\s*[:=]\s*["']?)[^"'\s,}&]+"""),
)


class RedactingFormatter(logging.Formatter):
    """Masks bearer tokens and credential fields in the rendered record."""

    def format(self, record: logging.LogRecord) -> str:
        rendered = super().format(record)
        for pattern in _SECRET_PATTERNS:
            rendered = pattern.sub(r"\1[redacted]", rendered)
        return rendered


class Log:
    """Centralized logging. Records go to stderr so stdout stays machine-readable."""

    _logger: logging.Logger = logging.getLogger("docintel")

    @classmethod
    def configure(cls, log_level: str) -> None:
        """Configure the logger with the specified level and a redacting stderr handler."""
        cls._logger.setLevel(log_level.upper())
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(
                RedactingFormatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
            )
            cls._logger.addHandler(handler)

    @classmethod
    def info(cls, message: str, **kwargs: object) -> None:
        cls._logger.info(message, extra=kwargs)

    @classmethod
    def error(cls, message: str, **kwargs: object) -> None:
        cls._logger.error(message, extra=kwargs)

    @classmethod
    def warning(cls, message: str, **kwargs: object) -> None:
        cls._logger.warning(message, extra=kwargs)

    @classmethod
    def debug(cls, message: str, **kwargs: object) -> None:
        cls._logger.debug(message, extra=kwargs)

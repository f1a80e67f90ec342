import logging
import sys

CONTEXT_FIELDS = ("method", "url", "status_code", "attempt")


class RequestContextFilter(logging.Filter):
    """Render the request context fields present on a record as ``key=value`` pairs."""

    def filter(self, record: logging.LogRecord) -> bool:
        pairs = [
            f"{name}={getattr(record, name)}"
            for name in CONTEXT_FIELDS
            if getattr(record, name, None) is not None
        ]
        record.request_context = f" ({' '.join(pairs)})" if pairs else ""
        return True


class Log:
    """Logging for the client and resource layers.

    Every call takes the same optional request context (method, url,
    status code, attempt number); fields left as ``None`` are omitted.
    """

    _logger: logging.Logger = logging.getLogger("resource_client")

    @classmethod
    def configure(cls, log_level: str) -> None:
        cls._logger.setLevel(log_level.upper())
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.addFilter(RequestContextFilter())
            handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] %(message)s%(request_context)s")
            )
            cls._logger.addHandler(handler)

    @staticmethod
    def _context(
        method: str | None,
        url: str | None,
        status_code: int | None,
        attempt: int | None,
    ) -> dict[str, object]:
        return {"method": method, "url": url, "status_code": status_code, "attempt": attempt}

    @classmethod
    def info(
        cls,
        message: str,
        *,
        method: str | None = None,
        url: str | None = None,
        status_code: int | None = None,
        attempt: int | None = None,
    ) -> None:
        cls._logger.info(message, extra=cls._context(method, url, status_code, attempt))

    @classmethod
    def warning(
        cls,
        message: str,
        *,
        method: str | None = None,
        url: str | None = None,
        status_code: int | None = None,
        attempt: int | None = None,
    ) -> None:
        cls._logger.warning(message, extra=cls._context(method, url, status_code, attempt))

    @classmethod
    def error(
        cls,
        message: str,
        *,
        method: str | None = None,
        url: str | None = None,
        status_code: int | None = None,
        attempt: int | None = None,
    ) -> None:
        cls._logger.error(message, extra=cls._context(method, url, status_code, attempt))

    @classmethod
    def debug(
        cls,
        message: str,
        *,
        method: str | None = None,
        url: str | None = None,
        status_code: int | None = None,
        attempt: int | None = None,
    ) -> None:
        cls._logger.debug(message, extra=cls._context(method, url, status_code, attempt))

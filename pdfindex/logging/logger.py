import logging
import sys

_DEV_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
_PROD_FORMAT = "%(asctime)s [%(levelname)s] pid=%(process)d %(name)s: %(message)s"


class Log:
    """Process-wide logging facade for the worker."""

    _logger: logging.Logger = logging.getLogger("pdfindex")

    @classmethod
    def configure(cls, log_level: str, app_env: str = "dev") -> None:
        """Set the level and attach a stdout handler once.

        Outside ``dev`` the format carries the process id, since several
        worker processes usually share one log stream.
        """
        cls._logger.setLevel(log_level.upper())
        cls._logger.propagate = False
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(
                logging.Formatter(_DEV_FORMAT if app_env == "dev" else _PROD_FORMAT)
            )
            cls._logger.addHandler(handler)

    @classmethod
    def info(cls, message: str, **kwargs: object) -> None:
        cls._logger.info(message, extra=kwargs)

    @classmethod
    def error(cls, message: str, exc_info: bool = False, **kwargs: object) -> None:
        """Log an error, with the active traceback when *exc_info* is set."""
        cls._logger.error(message, exc_info=exc_info, extra=kwargs)

    @classmethod
    def warning(cls, message: str, **kwargs: object) -> None:
        cls._logger.warning(message, extra=kwargs)

    @classmethod
    def debug(cls, message: str, **kwargs: object) -> None:
        cls._logger.debug(message, extra=kwargs)

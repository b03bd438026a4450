import logging
import re

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

from bruce.utils.request_id import get_request_id

custom_theme = Theme(
    {
        "info": "dim cyan",
        "warning": "magenta",
        "error": "bold red",
        "auth": "bold yellow",
        "memory": "bold blue",
        "relay": "bold green",
    }
)

console = Console(theme=custom_theme)

LOGGER_NAME = "bruce"


class CompactFilter(logging.Filter):
    """Shortens UUIDs and floats, masks tokens and prefixes the request id."""

    UUID_PATTERN = re.compile(
        r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}", re.I
    )
    FLOAT_PATTERN = re.compile(r"(\d+\.\d{4,})")
    # Access tokens travel in the post-login redirect URL
    TOKEN_PATTERN = re.compile(r"(token=)[^&\s\"']+")
    BEARER_PATTERN = re.compile(r"(Bearer\s+)[A-Za-z0-9\-._~+/]+=*")

    def filter(self, record):
        if not isinstance(record.msg, str):
            return True

        msg = record.msg
        if record.args:
            msg = record.getMessage()
            record.args = None

        request_id = get_request_id()
        if request_id:
            msg = f"[{request_id[:8]}] {msg}"

        def shorten_uuid(match):
            val = match.group(0)
            return f"{val[:4]}.."

        def shorten_float(match):
            val = float(match.group(0))
            return f"{val:.3f}"

        msg = self.TOKEN_PATTERN.sub(r"\1***", msg)
        msg = self.BEARER_PATTERN.sub(r"\1***", msg)
        msg = self.UUID_PATTERN.sub(shorten_uuid, msg)
        msg = self.FLOAT_PATTERN.sub(shorten_float, msg)

        record.msg = msg
        return True


def setup_global_logger(log_level: str = "INFO"):
    """
    Configures the application logger using Rich for readable output.

    Module loggers created with ``logging.getLogger(__name__)`` inside the
    ``bruce`` package propagate to this logger.
    """
    logger = logging.getLogger(LOGGER_NAME)

    level = getattr(logging, log_level.upper(), logging.INFO)
    logger.setLevel(level)

    # Avoid duplicate handlers
    if not logger.handlers:
        rich_handler = RichHandler(
            console=console,
            rich_tracebacks=True,
            markup=False,
            show_path=False,
            show_time=True,
            omit_repeated_times=True,
            keywords=["login", "callback", "memory", "relay", "websocket"],
        )
        formatter = logging.Formatter("%(message)s", datefmt="[%X]")
        rich_handler.setFormatter(formatter)
        rich_handler.addFilter(CompactFilter())
        logger.addHandler(rich_handler)

    return logger


logger = logging.getLogger(LOGGER_NAME)

# --- Standard library imports ---
import sys
import logging

# --- Project imports ---
from .config import Config


ROOT_LOGGER = "network_status"
HANDLER_NAME = "network_status.console"

# --- TIME level (readiness wait durations) ---
TIMING = 25   # Between INFO (20) and WARNING (30)
logging.addLevelName(TIMING, "TIME")

def timing(self, message, *args, **kwargs):
    """Logger.timing(): log at the TIME level."""
    if self.isEnabledFor(TIMING):
        self._log(TIMING, message, args, stacklevel=2, **kwargs)

logging.Logger.timing = timing

class TimingFilter(logging.Filter):
    """Drop TIME records unless LOG_TIMING is on."""
    def __init__(self, enabled: bool):
        super().__init__()
        self.enabled = enabled

    def filter(self, record: logging.LogRecord) -> bool:
        return self.enabled or record.levelno != TIMING

# --- Formatting ---
LEVEL_BADGES = {
    logging.DEBUG: ("🧱", "DEBUG"),
    logging.INFO: ("🟢", "INFO"),
    TIMING: ("⚡️", "TIME"),
    logging.WARNING: ("⚠️ ", "WARN"),
    logging.ERROR: ("❌", "ERROR"),
    logging.CRITICAL: ("🔥", "FATAL"),
}

class EmojiFormatter(logging.Formatter):
    """Adds `levelemoji` and a short `levelname` to every record."""

    def format(self, record: logging.LogRecord) -> str:
        emoji, short = LEVEL_BADGES.get(record.levelno, ("", record.levelname))
        record.levelemoji = emoji
        record.levelname = short
        return super().format(record)

def resolve_level(name: str | int | None) -> int:
    """
    Map a level name (or number) to a logging level.

    Unknown names fall back to INFO.
    """
    if name is None:
        name = Config.LOG_LEVEL
    if isinstance(name, int):
        return name

    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.INFO

# --- Public logging setup API ---
def setup_logging(level: str | int | None = None, timing: bool | None = None) -> None:
    """
    Install the console handler on the root logger.

    Called once by the host process; the watcher never configures logging
    itself. `level` defaults to Config.LOG_LEVEL and `timing` to
    Config.LOG_TIMING. Calling it again replaces the previous handler
    and leaves handlers installed by the host untouched.
    """
    root = logging.getLogger()
    root.setLevel(resolve_level(level))

    for old in [h for h in root.handlers if h.get_name() == HANDLER_NAME]:
        root.removeHandler(old)

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(
        EmojiFormatter(
            fmt="%(asctime)s %(levelemoji)s %(name)s:%(funcName)s → %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    handler.addFilter(TimingFilter(Config.LOG_TIMING if timing is None else timing))
    root.addHandler(handler)

def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")

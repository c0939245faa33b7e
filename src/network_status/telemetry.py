# --- Standard library imports ---
import logging


# --- Connectivity labels ---
CONNECTIVITY_EMOJI = {
    True: "🛜",
    False: "📴",
}

def connectivity_label(online: bool) -> str:
    return "ONLINE" if online else "OFFLINE"

def tlog(
    logger: logging.Logger,
    emoji: str,
    subsystem: str,
    state: str,
    primary: str = "—--",
    meta: str | None = None,
    level: int = logging.INFO,
) -> None:
    """
    Emit one aligned transition line.

    Format:
        SUBSYSTEM STATE PRIMARY | meta data

    Callers pass level=logging.DEBUG for transitions that are absorbed
    rather than reported (e.g. updates seen before the host is ready).
    """
    line = f"{subsystem:<12} {state:<12} {primary:<10}"
    if meta:
        line += f" | {meta}"

    logger.log(level, f"{emoji} {line}", stacklevel=2)

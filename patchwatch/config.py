import os

# --------------------------------------------------------------------
# Utility
# --------------------------------------------------------------------
def _bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")

# --------------------------------------------------------------------
# Core Runtime Flags
# --------------------------------------------------------------------
DRY_RUN = _bool("DRY_RUN", "false")
STATE_FILE = os.getenv("PATCHWATCH_STATE_FILE", "./config.json")
MAX_WORKERS = int(os.getenv("PATCHWATCH_MAX_WORKERS", "4"))

# --------------------------------------------------------------------
# HTTP
# --------------------------------------------------------------------
HTTP_TIMEOUT = float(os.getenv("PATCHWATCH_HTTP_TIMEOUT", "15"))
USER_AGENT = os.getenv("PATCHWATCH_USER_AGENT", "patchwatch (+https://blizztrack.com)")

# --------------------------------------------------------------------
# Version sources
# --------------------------------------------------------------------
REGION = os.getenv("PATCHWATCH_REGION", "us").strip() or "us"
BLIZZTRACK_API = os.getenv("BLIZZTRACK_API", "https://blizztrack.com/api/{id}/info/json?mode=vers")
BLIZZTRACK_NOTES = os.getenv("BLIZZTRACK_NOTES", "https://blizztrack.com/patch_notes/{id}/latest")

# --------------------------------------------------------------------
# Pushover
# --------------------------------------------------------------------
PUSHOVER_URL = os.getenv("PUSHOVER_URL", "https://api.pushover.net/1/messages.json")

"""
config.py
---------
Central configuration for the errand route planner.
Every knob can be overridden from the environment (or a backend/.env file).

Units: time in minutes, distance in miles, fuel as a fraction of a full tank.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the backend directory (if it exists) so env vars in that file
# are picked up by os.getenv() below.  Won't override vars already set in the shell.
_env_path = Path(__file__).parent / ".env"
if _env_path.exists():
    load_dotenv(_env_path, override=False)


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


# ── Time budget ──────────────────────────────────────────────────────────────
# Slack reserved off the top of every budget for traffic / parking variance.
BUFFER_RATIO: float       = float(os.getenv("BUFFER_RATIO",       "0.10"))
# Realized buffer at or below this share of the budget → "tight".
TIGHT_BUFFER_RATIO: float = float(os.getenv("TIGHT_BUFFER_RATIO", "0.05"))

# ── Dwell allocation ─────────────────────────────────────────────────────────
MIN_DWELL_MINUTES: int        = int(os.getenv("MIN_DWELL_MINUTES", "5"))        # hard floor per stop
COMPRESSION_WARN_RATIO: float = float(os.getenv("COMPRESSION_WARN_RATIO", "0.7"))
# Upper bound on the scale-up ratio. 1.0 = never allocate more than the
# category's typical dwell time, however much slack the budget has.
DWELL_SCALE_CAP: float        = float(os.getenv("DWELL_SCALE_CAP", "1.0"))
GENERIC_TASK_MINUTES: int     = int(os.getenv("GENERIC_TASK_MINUTES", "10"))

# ── Time phrase parsing ──────────────────────────────────────────────────────
# "by 5" with no am/pm: read as 17:00 once the clock is past 5 AM.
# Set to false for a strict grammar where bare hours are taken literally.
INFER_MERIDIEM: bool = _env_bool("INFER_MERIDIEM", "true")

# ── Fuel ─────────────────────────────────────────────────────────────────────
MIN_FUEL_THRESHOLD: float = float(os.getenv("MIN_FUEL_THRESHOLD", "0.2"))  # reserve share of tank
METERS_PER_MILE: float    = 1609.34

# ── Logging ──────────────────────────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
# Per-request JSONL event log (modules/observability/logger.py).
EVENT_LOG_ENABLED: bool = _env_bool("EVENT_LOG_ENABLED", "false")
EVENT_LOGS_DIR: str     = os.getenv("EVENT_LOGS_DIR", "")   # empty → backend/logs

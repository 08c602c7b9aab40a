"""Global configuration for the club portal reminder service."""

import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

# Supabase (hosted database backing the reminder queue and notification feed)
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")

# Local data (SQLite fallback when Supabase is not configured)
DATA_DIR = Path(os.getenv("CLUB_PORTAL_DATA_DIR", Path(os.getenv("LOCALAPPDATA", ".")) / "club-portal"))
DATA_DIR.mkdir(parents=True, exist_ok=True)

# Logging
LOG_DIR = DATA_DIR / "logs"
LOG_DIR.mkdir(parents=True, exist_ok=True)
LOG_LEVEL = os.getenv("CLUB_PORTAL_LOG_LEVEL", "INFO")

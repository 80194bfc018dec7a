import os
from dotenv import load_dotenv

load_dotenv()

SUPABASE_URL = os.getenv("SUPABASE_URL") or os.getenv("NEXT_PUBLIC_SUPABASE_URL")
SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY")
TIMEZONE = os.getenv("TIMEZONE", "Asia/Tokyo")

DEEPL_API_KEY = os.getenv("DEEPL_API_KEY") or None
GOOGLE_TRANSLATE_API_KEY = os.getenv("GOOGLE_TRANSLATE_API_KEY") or None

# Pause between sources in a run (seconds)
SOURCE_DELAY_S = float(os.getenv("JPEVENTS_SOURCE_DELAY_S", "1.0").strip() or "1.0")
HTTP_TIMEOUT_S = int(os.getenv("JPEVENTS_HTTP_TIMEOUT_S", "30").strip() or "30")


def require_supabase_env() -> tuple[str, str]:
    """Return (url, key) or fail with the names of the missing variables."""
    missing = []
    if not SUPABASE_URL:
        missing.append("SUPABASE_URL")
    if not SUPABASE_SERVICE_ROLE_KEY:
        missing.append("SUPABASE_SERVICE_ROLE_KEY")
    if missing:
        raise RuntimeError(
            f"Missing required environment variables: {', '.join(missing)}. "
            "Copy .env.example to .env and fill in your Supabase credentials."
        )
    return SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY

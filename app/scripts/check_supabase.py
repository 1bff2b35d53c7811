"""
Supabase Connection Check
Queries one row of the profiles table to confirm URL, key and network access.
Run with: python -m app.scripts.check_supabase
"""

import sys
import logging

from app.config import settings
from app.database.supabase_client import create_supabase_client
from supabase import Client

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def check_connection(supabase: Client) -> bool:
    """Return True when a profiles query succeeds"""
    logger.info("Testing Supabase connection...")
    try:
        result = supabase.table("profiles")\
            .select("*")\
            .limit(1)\
            .execute()
    except Exception as e:
        logger.error(f"Supabase connection failed: {e}")
        return False
    logger.info(f"Supabase connection OK ({len(result.data or [])} row(s) fetched)")
    return True


def main() -> int:
    try:
        supabase = create_supabase_client(settings)
    except ValueError as e:
        logger.error(str(e))
        return 1
    if not check_connection(supabase):
        logger.info("Check SUPABASE_URL and SUPABASE_KEY in your environment or .env file.")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

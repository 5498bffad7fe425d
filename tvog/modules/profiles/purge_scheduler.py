import asyncio
import logging
from tvog.config.settings import settings
from tvog.database.supabase_client import SupabaseClient
from tvog.modules.profiles.service import purge_expired_accounts

logger = logging.getLogger(__name__)


async def purge_once():
    """Run one purge pass; errors are logged so the loop keeps going."""
    if not SupabaseClient.has_service_client():
        logger.warning("Skipping account purge: service role key not configured")
        return
    try:
        purge_expired_accounts(SupabaseClient.get_service_client())
        logger.info("Expired accounts purged")
    except Exception as e:
        logger.error(f"Error purging expired accounts: {str(e)}")


async def account_purge_loop():
    """Background task that periodically deletes accounts past their deletion grace period"""
    while True:
        await purge_once()
        await asyncio.sleep(settings.account_purge_interval_seconds)

# /namer/services/maintenance_service.py

"""
Periodic housekeeping. Nothing here is scheduled in-process; an operator or
an external scheduler calls `run_cleanup` through the maintenance endpoint.
"""

import logging
from typing import Dict

from . import domain_service, export_service, share_service
from .database_service import DatabaseService

logger = logging.getLogger(__name__)


def run_cleanup(db: DatabaseService) -> Dict[str, int]:
    counts = {
        "generation_cache_cleared": db.clear_expired_generation_cache(),
        "domain_cache_cleared": domain_service.clear_expired_cache(db),
        "exports_deleted": export_service.cleanup_expired_exports(db),
        "shares_deactivated": share_service.deactivate_expired_shares(db),
    }
    logger.info("Cleanup finished: %s", counts)
    return counts

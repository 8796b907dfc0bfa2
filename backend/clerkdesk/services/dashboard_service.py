"""
Dashboard statistics

Four independent queries run concurrently. A metric whose query fails is
logged and shown as '0'; the others are unaffected.
"""
import asyncio
from datetime import date, timedelta
from typing import Optional

from clerkdesk.core.config import settings
from clerkdesk.core.logger import logger
from clerkdesk.db.backend import HostedBackend
from clerkdesk.db.models import Collection, INACTIVE_CASE_STATUSES
from clerkdesk.services.aggregation import aggregate_societies
from clerkdesk.utils.helpers import format_count


class DashboardService:

    def __init__(self, backend: HostedBackend, today: Optional[date] = None):
        self.backend = backend
        self.today = today or date.today()

    async def active_cases(self) -> str:
        data, error = await (
            self.backend.table(Collection.cases)
            .select("id", count="exact", head=True)
            .not_in("status", INACTIVE_CASE_STATUSES)
            .execute()
        )
        if error:
            logger.warning("Active case count failed: %s", error.message)
            return "0"
        return format_count(data)

    async def societies(self) -> str:
        data, error = await self.backend.table(Collection.cases).select("society").execute()
        if error:
            logger.warning("Society scan failed: %s", error.message)
            return "0"
        return format_count(len(aggregate_societies(data or [])))

    async def upcoming_hearings(self) -> str:
        window_end = self.today + timedelta(days=settings.UPCOMING_HEARING_WINDOW_DAYS)
        data, error = await (
            self.backend.table(Collection.interim_orders)
            .select("id", count="exact", head=True)
            .gte("next_date", self.today)
            .lte("next_date", window_end)
            .execute()
        )
        if error:
            logger.warning("Upcoming hearing count failed: %s", error.message)
            return "0"
        return format_count(data)

    async def total_judgments(self) -> str:
        data, error = await (
            self.backend.table(Collection.judgments)
            .select("id", count="exact", head=True)
            .execute()
        )
        if error:
            logger.warning("Judgment count failed: %s", error.message)
            return "0"
        return format_count(data)

    async def stats(self) -> dict:
        active, societies, upcoming, judgments = await asyncio.gather(
            self.active_cases(),
            self.societies(),
            self.upcoming_hearings(),
            self.total_judgments(),
        )
        return {
            "active_cases": active,
            "societies": societies,
            "upcoming_hearings": upcoming,
            "total_judgments": judgments,
        }

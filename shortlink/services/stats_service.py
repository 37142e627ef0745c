"""
Analytics Aggregation Service

Read-only counting queries over visit_records, scoped either to one link or
to every link owned by a user (the dashboard view).

Design Decisions:
- Every figure is a single COUNT / GROUP BY query
- Grouped counts are ordered by count descending, ties by label
- The visits-over-time series is bucketed by day over a trailing window
  and ordered oldest first
- An empty scope yields zeros and empty lists; a storage error is logged and
  yields the same empty report so a broken analytics view never breaks the page
"""

import logging
from datetime import timedelta
from typing import Any, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from shortlink.core.setting import settings
from shortlink.db.interface import DatabaseAdapter
from shortlink.db.models import ShortLink, VisitRecord, utcnow
from shortlink.db.session import db_adapter as default_adapter
from shortlink.services.link_registry import LinkRegistry

logger = logging.getLogger(__name__)

TOP_REFERRERS = 10
RECENT_LINKS = 5

# (report key, row key, column)
GROUPINGS = (
    ("browsers", "browser", VisitRecord.browser),
    ("os", "os", VisitRecord.os),
    ("devices", "device", VisitRecord.device),
    ("countries", "country", VisitRecord.country),
    ("referrers", "referrer", VisitRecord.referrer),
)


def empty_report() -> dict[str, Any]:
    """Analytics report for a scope without visits."""
    report: dict[str, Any] = {"total_visits": 0, "unique_visitors": 0}
    for report_key, _, _ in GROUPINGS:
        report[report_key] = []
    report["visits_over_time"] = []
    return report


class StatsService:
    """
    Service for analytics over visit records.

    Use get_link_analytics() for one link and get_owner_analytics() /
    get_dashboard_summary() for everything a user owns.
    """

    def __init__(self, session: AsyncSession, adapter: Optional[DatabaseAdapter] = None):
        """
        Args:
            session: Async database session
            adapter: Database adapter supplying dialect-specific SQL (default: configured one)
        """
        self.session = session
        self.adapter = adapter or default_adapter

    async def get_link_analytics(self, link_id: int, days: Optional[int] = None) -> dict[str, Any]:
        """
        Analytics report for a single link.

        Args:
            link_id: The link to report on
            days: Trailing window for visits_over_time (default 30)

        Returns:
            Report dictionary (see empty_report() for the shape)
        """
        if days is None:
            days = settings.LINK_ANALYTICS_WINDOW_DAYS
        return await self._build_report(VisitRecord.link_id == link_id, days)

    async def get_owner_analytics(self, owner_id: int, days: Optional[int] = None) -> dict[str, Any]:
        """Analytics report across all links owned by a user (default 7-day window)."""
        if days is None:
            days = settings.DASHBOARD_ANALYTICS_WINDOW_DAYS
        return await self._build_report(self._owner_scope(owner_id), days)

    async def get_dashboard_summary(self, owner_id: int, days: Optional[int] = None) -> dict[str, Any]:
        """
        Dashboard overview for a user.

        Returns:
            Dictionary with:
            - total_links: Number of links owned
            - total_visits: Visits across those links
            - visits_per_link: Average, rounded to one decimal (0 without links)
            - recent_links: The newest links
            - analytics: Owner-scoped analytics report
        """
        registry = LinkRegistry(self.session)
        analytics = await self.get_owner_analytics(owner_id, days)

        try:
            result = await self.session.execute(
                select(func.count(ShortLink.id)).where(ShortLink.owner_id == owner_id)
            )
            total_links = result.scalar_one()
            recent_links = await registry.list_by_owner(owner_id, limit=RECENT_LINKS)
        except SQLAlchemyError as e:
            logger.error(f"Failed to load dashboard for owner {owner_id}: {e}", exc_info=True)
            total_links, recent_links = 0, []

        total_visits = analytics["total_visits"]
        visits_per_link = round(total_visits / total_links, 1) if total_links else 0

        return {
            "total_links": total_links,
            "total_visits": total_visits,
            "visits_per_link": visits_per_link,
            "recent_links": recent_links,
            "analytics": analytics,
        }

    @staticmethod
    def _owner_scope(owner_id: int) -> ColumnElement:
        owned_links = select(ShortLink.id).where(ShortLink.owner_id == owner_id)
        return VisitRecord.link_id.in_(owned_links)

    async def _build_report(self, scope: ColumnElement, days: int) -> dict[str, Any]:
        try:
            report = await self._totals(scope)
            for report_key, row_key, column in GROUPINGS:
                report[report_key] = await self._grouped_counts(scope, row_key, column)
            report["visits_over_time"] = await self._visits_over_time(scope, days)
            return report
        except SQLAlchemyError as e:
            logger.error(f"Failed to aggregate analytics: {e}", exc_info=True)
            return empty_report()

    async def _totals(self, scope: ColumnElement) -> dict[str, Any]:
        statement = select(
            func.count(VisitRecord.id),
            func.count(VisitRecord.visitor_ip.distinct()),
        ).where(scope)
        result = await self.session.execute(statement)
        total, unique = result.one()
        return {"total_visits": total or 0, "unique_visitors": unique or 0}

    async def _grouped_counts(self, scope: ColumnElement, row_key: str, column) -> list[dict[str, Any]]:
        count = func.count(VisitRecord.id).label("count")
        statement = (
            select(column, count)
            .where(scope, column.is_not(None), column != "")
            .group_by(column)
            .order_by(count.desc(), column)
        )
        if row_key == "referrer":
            statement = statement.limit(TOP_REFERRERS)

        result = await self.session.execute(statement)
        return [{row_key: value, "count": n} for value, n in result.all()]

    async def _visits_over_time(self, scope: ColumnElement, days: int) -> list[dict[str, Any]]:
        since = utcnow() - timedelta(days=days)
        bucket = self.adapter.day_bucket(VisitRecord.timestamp).label("day")
        count = func.count(VisitRecord.id).label("count")
        statement = (
            select(bucket, count)
            .where(scope, VisitRecord.timestamp >= since)
            .group_by(bucket)
            .order_by(bucket)
        )
        result = await self.session.execute(statement)
        return [{"date": str(day), "count": n} for day, n in result.all()]

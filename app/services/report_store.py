"""
Report persistence backends.

Every backend implements ``create_report`` with the same signature and
raises ReportStoreException on failure. Writes are not deduplicated:
two calls with identical arguments create two reports.
"""

from typing import Callable, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from pydantic import ValidationError

from app.clients.supabase_client import SupabaseRestClient, SupabaseRestError
from app.core.config import Settings
from app.core.exceptions import ReportStoreException
from app.core.logger import logger
from app.db.session import get_session_factory
from app.models.community_report import CommunityReport
from app.schemas.moderation import Report
from app.services.decision import build_report_row


class ReportStore(Protocol):
    def create_report(
        self,
        community_id: str,
        accused_id: str,
        entity_id: str,
        entity_type: str,
        reason: str,
        description: str,
        priority: str,
    ) -> Report:
        ...


class SupabaseReportStore:
    """Inserts reports through the Supabase REST API with the service-role key."""

    backend = "supabase"

    def __init__(self, client: SupabaseRestClient, table: str = "community_reports"):
        self.client = client
        self.table = table

    def create_report(self, community_id, accused_id, entity_id, entity_type, reason, description, priority) -> Report:
        row = build_report_row(community_id, accused_id, entity_id, entity_type, reason, description, priority)
        try:
            created = self.client.insert(self.table, [row])
        except SupabaseRestError as e:
            raise ReportStoreException(
                str(e),
                backend=self.backend,
                details={"status_code": e.status_code, "table": self.table}
            )

        if not isinstance(created, list) or not created:
            raise ReportStoreException(
                "Database error: insert returned no rows",
                backend=self.backend,
                details={"table": self.table}
            )
        try:
            return Report(**created[0])
        except (TypeError, ValidationError) as e:
            raise ReportStoreException(
                f"Database error: unexpected report row: {str(e)}",
                backend=self.backend,
                details={"table": self.table}
            )


class SqlAlchemyReportStore:
    """Inserts reports into the ``community_reports`` table via SQLAlchemy."""

    backend = "database"

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def create_report(self, community_id, accused_id, entity_id, entity_type, reason, description, priority) -> Report:
        row = build_report_row(community_id, accused_id, entity_id, entity_type, reason, description, priority)
        db = self.session_factory()
        try:
            report = CommunityReport(**row)
            db.add(report)
            db.commit()
            db.refresh(report)
            return Report(
                id=str(report.id),
                community_id=report.community_id,
                reporter_id=report.reporter_id,
                accused_id=report.accused_id,
                post_id=report.post_id,
                comment_id=report.comment_id,
                reason=report.reason,
                description=report.description,
                priority=report.priority.value,
                status=report.status.value,
                created_at=report.created_at,
            )
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(
                "Database error creating community report",
                extra={"entity_id": entity_id, "entity_type": entity_type, "error": str(e)},
                exc_info=True
            )
            raise ReportStoreException(
                f"Database error: {str(e)}",
                backend=self.backend
            )
        finally:
            db.close()


def build_report_store(settings: Settings) -> ReportStore:
    """Construct the report store selected by ``REPORT_STORE_BACKEND``."""
    if settings.report_store_backend == "database":
        # Engine for this DATABASE_URL is created lazily and reused
        return SqlAlchemyReportStore(get_session_factory(settings.database_url))

    client = SupabaseRestClient(
        settings.supabase_url,
        settings.supabase_service_role_key,
        timeout=settings.request_timeout
    )
    return SupabaseReportStore(client, table=settings.reports_table)

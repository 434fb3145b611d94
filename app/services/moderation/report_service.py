from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from typing import List
from app.core.exceptions import NotFound, ValidationFailed
from app.core.logger import logger
from app.models.moderation.report import Report
from app.schemas.moderation.moderation import ReportCreate, ReportUpdate
from app.utils.sanitize import sanitize_text


async def create_report(db: AsyncSession, reporter_id: str, data: ReportCreate) -> Report:
    if reporter_id == data.reported_id:
        raise ValidationFailed("Cannot report yourself")

    report = Report(
        reporter_id=reporter_id,
        reported_id=data.reported_id,
        reason=data.reason,
        details=sanitize_text(data.details) if data.details else None,
        activity_id=data.activity_id,
        message_id=data.message_id,
    )
    db.add(report)
    await db.commit()
    await db.refresh(report)
    logger.info(f"Report {report.id} ({data.reason.value}) filed against {data.reported_id}")
    return report


async def get_all_reports(db: AsyncSession) -> List[Report]:
    result = await db.execute(select(Report).order_by(Report.created_at.desc(), Report.id.desc()))
    return result.scalars().all()


async def update_report_status(db: AsyncSession, report_id: int, data: ReportUpdate) -> dict:
    report = await db.get(Report, report_id)
    if not report:
        raise NotFound("Report not found")

    report.status = data.status
    if data.admin_notes is not None:
        report.admin_notes = data.admin_notes
    await db.commit()
    logger.info(f"Report {report_id} moved to {data.status.value}")
    return {"ok": True}

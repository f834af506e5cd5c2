from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from quizlink.models.assessment import Assessment
from quizlink.models.assessment_link import AssessmentLink
from quizlink.models.assessment_result import AssessmentResult

async def get_dashboard_stats(db: AsyncSession, admin_id: int):
    assessment_ids = select(Assessment.assessment_id).where(Assessment.admin_id == admin_id)

    total_assessments = (await db.execute(
        select(func.count()).select_from(Assessment).where(Assessment.admin_id == admin_id)
    )).scalar() or 0

    total_links = (await db.execute(
        select(func.count()).select_from(AssessmentLink).where(AssessmentLink.assessment_id.in_(assessment_ids))
    )).scalar() or 0

    results = (await db.execute(
        select(AssessmentResult.score, AssessmentResult.total_questions)
        .join(AssessmentLink, AssessmentResult.assessment_link_id == AssessmentLink.link_id)
        .where(AssessmentLink.assessment_id.in_(assessment_ids))
    )).all()

    completed = len(results)
    percentages = [score / total * 100 for score, total in results if total]
    avg_score = round(sum(percentages) / len(percentages)) if percentages else 0

    return {
        "total_assessments": total_assessments,
        "active_links": total_links - completed,
        "completed": completed,
        "avg_score": f"{avg_score}%"
    }

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from quizlink.db.database import get_db
from quizlink.schemas.result_schema import DashboardStats
from quizlink.services.auth.auth_service import admin_required
from quizlink.services.dashboard_service import get_dashboard_stats

router = APIRouter()


@router.get("/dashboard/stats", response_model=DashboardStats)
async def dashboard_stats(
    db: AsyncSession = Depends(get_db),
    current_user=Depends(admin_required)
):
    return await get_dashboard_stats(db, current_user.user_id)

"""
Reports API router - daily cross-group reality report
"""

from fastapi import APIRouter, Depends, HTTPException
from typing import Optional
import logging

from api.dependencies import get_group_service
from services.group_service import GroupService, InvalidReportDateError

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/internal", tags=["reports"])


@router.post("/daily-report")
async def daily_report(
    date: Optional[str] = None,
    service: GroupService = Depends(get_group_service),
):
    """
    Aggregate the day's logs of every group and post the report

    Args:
        date: Report date (YYYY-MM-DD), defaults to today (UTC)
    """
    try:
        post = await service.post_daily_report(date)
    except InvalidReportDateError:
        raise HTTPException(status_code=400, detail="date must be YYYY-MM-DD")
    except Exception as e:
        logger.error(f"Report lost in hyperspace: {e}")
        raise HTTPException(status_code=500, detail="Failed to generate report")

    if post is None:
        return {"status": "success", "message": "No data to report"}
    return {"status": "success", "postId": post.get("id")}


@router.get("/reports")
async def list_reports(
    limit: int = 50,
    service: GroupService = Depends(get_group_service),
):
    """Recent report posts (hot listing, max 100)"""
    try:
        reports = await service.list_reports(limit=min(limit, 100))
    except Exception as e:
        logger.error(f"Failed to fetch reports: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch reports")

    return {"status": "success", "reports": reports}

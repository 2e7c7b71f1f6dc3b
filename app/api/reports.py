"""
Report verification route: look up a past analysis by its report ID.
"""

from fastapi import APIRouter

from app.services.reports_service import get_report

router = APIRouter(tags=["Reports"])


@router.get("/api/v1/reports/{report_id}")
async def get_report_route(report_id: str):
    """
    Returns the stored AnalysisResult for `report_id`. No auth required;
    the ID itself is the capability.
    """
    return get_report(report_id)

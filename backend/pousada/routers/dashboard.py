"""
仪表盘路由
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from pousada.database import get_db
from pousada.models.schemas import DashboardStats
from pousada.services.report_service import ReportService

router = APIRouter(prefix="/dashboard", tags=["仪表盘"])


@router.get("/stats", response_model=DashboardStats)
def get_dashboard_stats(db: Session = Depends(get_db)):
    """获取仪表盘数据"""
    service = ReportService(db)
    return DashboardStats(**service.get_dashboard_stats())

"""
报表路由
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from pousada.database import get_db
from pousada.models.schemas import FinancialReport, OccupancyReport
from pousada.services.report_service import ReportService

router = APIRouter(prefix="/reports", tags=["统计报表"])


@router.get("/financial", response_model=FinancialReport)
def get_financial_report(db: Session = Depends(get_db)):
    """获取财务报表（本月/上月营收与消费营收）"""
    service = ReportService(db)
    return FinancialReport(**service.get_financial_report())


@router.get("/occupancy", response_model=OccupancyReport)
def get_occupancy_report(db: Session = Depends(get_db)):
    """获取入住率报表"""
    service = ReportService(db)
    return OccupancyReport(**service.get_occupancy_report())

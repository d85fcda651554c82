"""
数据统计API路由（只读）
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from debate_live.core.database import get_db
from debate_live.core.utils import utc_now
from debate_live.services.statistics_service import StatisticsService

router = APIRouter()


@router.get("/summary")
async def get_summary(db: Session = Depends(get_db)):
    """统计汇总"""
    return StatisticsService(db).summary()


@router.get("/daily")
async def get_daily(start: Optional[str] = None, end: Optional[str] = None, db: Session = Depends(get_db)):
    """每日票数（可按日期范围过滤，YYYY-MM-DD）"""
    return StatisticsService(db).list_daily(start, end)


@router.get("/active-users")
async def get_active_users(day: Optional[str] = None, threshold: int = 8, db: Session = Depends(get_db)):
    """某日投票次数超过阈值的活跃用户数；默认今天"""
    try:
        target = date.fromisoformat(day) if day else utc_now().date()
    except ValueError:
        raise HTTPException(status_code=400, detail="day 格式必须为 YYYY-MM-DD")
    active_users = StatisticsService(db).count_active_users(target, threshold)
    return {"activeUsers": active_users, "date": target.isoformat()}

"""
直播流管理API路由
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from debate_live.api.dependencies import get_live_coordinator, http_error
from debate_live.core.database import get_db
from debate_live.core.errors import LiveError
from debate_live.schemas.stream_schemas import StreamCreate, StreamUpdate, StreamResponse
from debate_live.services.live_coordinator import LiveCoordinator
from debate_live.services.stream_service import StreamService

router = APIRouter()


@router.get("/", response_model=List[StreamResponse])
async def list_streams(enabled_only: bool = False, db: Session = Depends(get_db)):
    """获取直播流列表"""
    service = StreamService(db)
    return service.list_enabled_streams() if enabled_only else service.list_streams()


@router.post("/", response_model=StreamResponse)
async def create_stream(data: StreamCreate, db: Session = Depends(get_db)):
    """创建直播流"""
    return StreamService(db).create_stream(data)


@router.get("/{stream_id}", response_model=StreamResponse)
async def get_stream(stream_id: str, db: Session = Depends(get_db)):
    """获取直播流信息"""
    try:
        return StreamService(db).require_stream(stream_id)
    except LiveError as e:
        raise http_error(e)


@router.put("/{stream_id}", response_model=StreamResponse)
async def update_stream(stream_id: str, data: StreamUpdate, db: Session = Depends(get_db)):
    """更新直播流"""
    try:
        return StreamService(db).update_stream(stream_id, data)
    except LiveError as e:
        raise http_error(e)


@router.post("/{stream_id}/toggle", response_model=StreamResponse)
async def toggle_stream(stream_id: str, db: Session = Depends(get_db)):
    """启用/禁用直播流"""
    try:
        return StreamService(db).toggle_stream(stream_id)
    except LiveError as e:
        raise http_error(e)


@router.delete("/{stream_id}")
async def delete_stream(
    stream_id: str,
    db: Session = Depends(get_db),
    coordinator: LiveCoordinator = Depends(get_live_coordinator),
):
    """删除直播流（直播中会先关播，票数一并清除）"""
    try:
        StreamService(db).require_stream(stream_id)
        await coordinator.forget_stream(stream_id)
        StreamService(db).delete_stream(stream_id)
    except LiveError as e:
        raise http_error(e)
    return {"message": "直播流已删除", "streamId": stream_id}

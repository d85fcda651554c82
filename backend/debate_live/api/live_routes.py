"""
直播控制API路由
"""

from fastapi import APIRouter, Depends
from typing import List

from debate_live.api.dependencies import get_live_coordinator, http_error
from debate_live.core.errors import LiveError
from debate_live.schemas.live_schemas import (
    AIControlRequest,
    DashboardInfo,
    LiveSessionInfo,
    OnlineCountUpdate,
    StartLiveRequest,
    StopLiveRequest,
)
from debate_live.services.live_coordinator import LiveCoordinator

router = APIRouter()


@router.post("/start", response_model=LiveSessionInfo)
async def start_live(
    request: StartLiveRequest,
    coordinator: LiveCoordinator = Depends(get_live_coordinator),
):
    """开始直播"""
    try:
        return await coordinator.start_live(request.stream_id, auto_start_ai=request.auto_start_ai)
    except LiveError as e:
        raise http_error(e)


@router.post("/stop", response_model=LiveSessionInfo)
async def stop_live(
    request: StopLiveRequest,
    coordinator: LiveCoordinator = Depends(get_live_coordinator),
):
    """停止直播（重复停止视为成功）"""
    return await coordinator.stop_live(request.stream_id, reason=request.reason)


@router.get("/status", response_model=List[LiveSessionInfo])
async def list_live_status(coordinator: LiveCoordinator = Depends(get_live_coordinator)):
    """所有直播流的直播状态"""
    return coordinator.list_statuses()


@router.get("/status/{stream_id}", response_model=LiveSessionInfo)
async def get_live_status(stream_id: str, coordinator: LiveCoordinator = Depends(get_live_coordinator)):
    return coordinator.get_status(stream_id)


@router.get("/history/{stream_id}", response_model=List[LiveSessionInfo])
async def get_live_history(
    stream_id: str,
    limit: int = 50,
    coordinator: LiveCoordinator = Depends(get_live_coordinator),
):
    """直播场次记录"""
    return coordinator.live_history(stream_id, limit=limit)


@router.post("/online-count")
async def set_online_count(
    request: OnlineCountUpdate,
    coordinator: LiveCoordinator = Depends(get_live_coordinator),
):
    """管理员校正在线人数"""
    coordinator.presence.set_online_count(request.stream_id, request.online_count)
    await coordinator.publish_online_counts()
    return {"streamId": request.stream_id, "onlineCount": coordinator.presence.get_online_count(request.stream_id)}


@router.post("/ai/start", response_model=LiveSessionInfo)
async def start_ai(
    request: AIControlRequest,
    coordinator: LiveCoordinator = Depends(get_live_coordinator),
):
    """启动AI解说"""
    try:
        return await coordinator.start_ai(request.stream_id)
    except LiveError as e:
        raise http_error(e)


@router.post("/ai/stop", response_model=LiveSessionInfo)
async def stop_ai(
    request: AIControlRequest,
    coordinator: LiveCoordinator = Depends(get_live_coordinator),
):
    """停止AI解说"""
    return await coordinator.stop_ai(request.stream_id)


@router.get("/dashboard/{stream_id}", response_model=DashboardInfo)
async def get_dashboard(stream_id: str, coordinator: LiveCoordinator = Depends(get_live_coordinator)):
    """后台仪表盘：直播状态、票数、在线人数与辩题"""
    try:
        return coordinator.dashboard(stream_id)
    except LiveError as e:
        raise http_error(e)

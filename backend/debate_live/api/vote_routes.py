"""
投票API路由
"""

from fastapi import APIRouter, Depends

from debate_live.api.dependencies import get_live_coordinator, http_error
from debate_live.core.errors import LiveError
from debate_live.schemas.live_schemas import (
    AdminVoteUpdate,
    AdminVoteUpdateResponse,
    TallyResponse,
    VoteRequest,
)
from debate_live.services.live_coordinator import LiveCoordinator

router = APIRouter()


@router.post("/user-vote", response_model=TallyResponse)
async def submit_vote(
    request: VoteRequest,
    coordinator: LiveCoordinator = Depends(get_live_coordinator),
):
    """观众投票：每场一次，观众 2 票 / 评委按配置票数，全部投给一方"""
    try:
        return await coordinator.submit_vote(request.stream_id, request.participant_id, request.side)
    except LiveError as e:
        raise http_error(e)


@router.get("/totals")
async def get_totals(coordinator: LiveCoordinator = Depends(get_live_coordinator)):
    """全平台票数：当前票数之和与累计总票数"""
    return coordinator.global_totals()


@router.get("/display/{stream_id}", response_model=TallyResponse)
async def get_display_ratio(stream_id: str, coordinator: LiveCoordinator = Depends(get_live_coordinator)):
    """大屏票比：只读本场票数，未直播为 0:0"""
    return coordinator.display_ratio(stream_id)


@router.get("/{stream_id}", response_model=TallyResponse)
async def get_votes(stream_id: str, coordinator: LiveCoordinator = Depends(get_live_coordinator)):
    """直播流当前票数"""
    return coordinator.current_tally(stream_id)


@router.post("/admin/update", response_model=AdminVoteUpdateResponse)
async def admin_update_votes(
    request: AdminVoteUpdate,
    coordinator: LiveCoordinator = Depends(get_live_coordinator),
):
    """管理员设置/增加/重置当前票数"""
    try:
        return await coordinator.update_votes(
            request.stream_id,
            request.action,
            request.left_votes,
            request.right_votes,
            request.reason,
        )
    except LiveError as e:
        raise http_error(e)


@router.post("/admin/cap/{stream_id}")
async def cap_votes(stream_id: str, coordinator: LiveCoordinator = Depends(get_live_coordinator)):
    """按在线人数上限压缩票数"""
    try:
        return await coordinator.cap_if_exceeded(stream_id)
    except LiveError as e:
        raise http_error(e)

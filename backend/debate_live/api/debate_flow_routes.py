"""
辩论流程API路由
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from debate_live.api.dependencies import get_live_coordinator, http_error
from debate_live.core.database import get_db
from debate_live.core.errors import LiveError
from debate_live.schemas.debate_schemas import DebateFlowControl, DebateFlowInfo, DebateFlowUpdate
from debate_live.schemas.event_schemas import DebateFlowControlled, DebateFlowUpdated
from debate_live.services.debate_flow_service import DebateFlowService
from debate_live.services.live_coordinator import LiveCoordinator
from debate_live.services.stream_service import StreamService

router = APIRouter()


@router.get("/{stream_id}", response_model=DebateFlowInfo)
async def get_debate_flow(stream_id: str, db: Session = Depends(get_db)):
    """获取辩论流程（未设置时为空）"""
    try:
        StreamService(db).require_stream(stream_id)
    except LiveError as e:
        raise http_error(e)
    return DebateFlowService(db).get_flow(stream_id)


@router.post("/", response_model=DebateFlowInfo)
async def save_debate_flow(
    data: DebateFlowUpdate,
    db: Session = Depends(get_db),
    coordinator: LiveCoordinator = Depends(get_live_coordinator),
):
    """保存辩论流程并通知前台"""
    try:
        flow = DebateFlowService(db).set_flow(data.stream_id, data.segments)
    except LiveError as e:
        raise http_error(e)
    await coordinator.manager.publish(DebateFlowUpdated(stream_id=data.stream_id, flow=flow.segments))
    return flow


@router.post("/control")
async def control_debate_flow(
    data: DebateFlowControl,
    db: Session = Depends(get_db),
    coordinator: LiveCoordinator = Depends(get_live_coordinator),
):
    """下发流程控制指令：开始/暂停/继续/重置/下一环节/上一环节"""
    try:
        StreamService(db).require_stream(data.stream_id)
    except LiveError as e:
        raise http_error(e)
    await coordinator.manager.publish(DebateFlowControlled(stream_id=data.stream_id, action=data.action))
    return {"success": True, "streamId": data.stream_id, "action": data.action}

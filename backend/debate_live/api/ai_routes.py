"""
AI解说API路由
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List

from debate_live.api.dependencies import get_live_coordinator, get_ollama_service, http_error
from debate_live.core.config import settings
from debate_live.core.database import get_db
from debate_live.core.errors import ErrorCode, LiveError
from debate_live.schemas.ai_schemas import AIContentInfo
from debate_live.schemas.event_schemas import AIContentCreated
from debate_live.services.commentary_service import CommentaryService
from debate_live.services.live_coordinator import LiveCoordinator
from debate_live.services.ollama_service import OllamaService
from debate_live.services.stream_service import StreamService

router = APIRouter()


@router.post("/commentary/{stream_id}", response_model=AIContentInfo)
async def generate_commentary(
    stream_id: str,
    db: Session = Depends(get_db),
    coordinator: LiveCoordinator = Depends(get_live_coordinator),
    ollama: OllamaService = Depends(get_ollama_service),
):
    """为直播流生成一条AI解说（需先启动AI）"""
    try:
        stream = StreamService(db).require_stream(stream_id)
        if not coordinator.is_ai_running(stream_id):
            raise LiveError(ErrorCode.INVALID_REQUEST, "该直播流的AI解说未启动")
        tally = coordinator.ledger.session(stream_id) if coordinator.is_live(stream_id) else coordinator.ledger.current(stream_id)
        service = CommentaryService(db, ollama, settings.OLLAMA_MODEL)
        content = await service.generate_commentary(stream, tally, coordinator.current_live_id(stream_id))
    except LiveError as e:
        raise http_error(e)

    await coordinator.manager.publish(AIContentCreated(
        id=content.id,
        stream_id=stream_id,
        content=content.content,
        model_name=content.model_name,
    ))
    return content


@router.get("/commentary/{stream_id}", response_model=List[AIContentInfo])
async def list_commentary(
    stream_id: str,
    limit: int = 20,
    db: Session = Depends(get_db),
    ollama: OllamaService = Depends(get_ollama_service),
):
    """直播流的AI解说列表（最新在前）"""
    return CommentaryService(db, ollama, settings.OLLAMA_MODEL).list_commentary(stream_id, limit)


@router.delete("/commentary/item/{content_id}")
async def delete_commentary(
    content_id: int,
    db: Session = Depends(get_db),
    ollama: OllamaService = Depends(get_ollama_service),
):
    if not CommentaryService(db, ollama, settings.OLLAMA_MODEL).delete_commentary(content_id):
        raise HTTPException(status_code=404, detail="解说不存在")
    return {"message": "解说已删除", "id": content_id}


@router.get("/health")
async def check_ollama_health(ollama: OllamaService = Depends(get_ollama_service)):
    """检查Ollama服务健康状态"""
    is_healthy = await ollama.check_health()
    return {
        "status": "healthy" if is_healthy else "unhealthy",
        "ollama_available": is_healthy
    }

"""
AI辩论解说服务
"""

import logging
from typing import List, Optional

import httpx
from sqlalchemy.orm import Session

from debate_live.core.errors import ErrorCode, LiveError
from debate_live.models.ai_content import AIContent
from debate_live.models.stream import Stream
from debate_live.schemas.ai_schemas import AIContentInfo
from debate_live.schemas.live_schemas import Tally
from debate_live.services.ollama_service import OllamaService

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "你是一名辩论赛直播解说。请根据辩题与实时票数，用中文写一段不超过120字的点评，"
    "语气客观、有现场感，不要偏袒任何一方。"
)


def build_prompt(stream: Stream, tally: Tally) -> str:
    """根据辩题与票数拼装提示词"""
    title = stream.debate_title or stream.name
    lines = [f"辩题：{title}"]
    if stream.left_position:
        lines.append(f"正方：{stream.left_position}")
    if stream.right_position:
        lines.append(f"反方：{stream.right_position}")
    lines.append(f"当前票数：正方 {tally.left_votes} 票，反方 {tally.right_votes} 票")
    return "\n".join(lines)


class CommentaryService:
    """调用 Ollama 生成解说并保存"""

    def __init__(self, db: Session, ollama: OllamaService, model: str):
        self.db = db
        self.ollama = ollama
        self.model = model

    async def generate_commentary(self, stream: Stream, tally: Tally, live_id: Optional[str] = None) -> AIContentInfo:
        prompt = build_prompt(stream, tally)
        try:
            result = await self.ollama.generate(self.model, prompt, system=SYSTEM_PROMPT)
        except httpx.HTTPError as e:
            logger.warning(f"生成AI解说失败: {e}")
            raise LiveError(ErrorCode.AI_UNAVAILABLE, f"AI服务不可用: {e}")

        if not result.message:
            raise LiveError(ErrorCode.AI_UNAVAILABLE, "AI服务返回了空内容")

        content = AIContent(
            stream_id=stream.id,
            live_id=live_id,
            model_name=result.model,
            content=result.message,
        )
        self.db.add(content)
        self.db.commit()
        self.db.refresh(content)
        logger.info(f"🤖 已为直播流 {stream.id} 生成解说 #{content.id}")
        return AIContentInfo.model_validate(content)

    def list_commentary(self, stream_id: str, limit: int = 20) -> List[AIContentInfo]:
        rows = self.db.query(AIContent).filter(
            AIContent.stream_id == stream_id
        ).order_by(AIContent.id.desc()).limit(limit).all()
        return [AIContentInfo.model_validate(r) for r in rows]

    def delete_commentary(self, content_id: int) -> bool:
        row = self.db.get(AIContent, content_id)
        if row is None:
            return False
        self.db.delete(row)
        self.db.commit()
        return True

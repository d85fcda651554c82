"""
Ollama集成服务
"""

import logging
from typing import Optional

import httpx

from debate_live.core.config import settings
from debate_live.schemas.ai_schemas import GenerateResponse

logger = logging.getLogger(__name__)


class OllamaService:
    """Ollama API集成服务"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.OLLAMA_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.OLLAMA_TIMEOUT
        # 测试时注入 httpx.MockTransport
        self.transport = transport

    def _client(self, timeout: Optional[float] = None) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else self.timeout,
            transport=self.transport,
        )

    async def generate(self, model: str, prompt: str, system: Optional[str] = None) -> GenerateResponse:
        """单次生成（非流式）"""
        payload = {
            "model": model,
            "prompt": prompt,
            "stream": False
        }
        if system:
            payload["system"] = system

        async with self._client() as client:
            response = await client.post("/api/generate", json=payload)
            response.raise_for_status()
            data = response.json()

        return GenerateResponse(
            model=data.get("model", model),
            message=data.get("response", "").strip(),
            done=data.get("done", True),
            total_duration=data.get("total_duration"),
            eval_count=data.get("eval_count"),
        )

    async def check_health(self) -> bool:
        """检查Ollama服务健康状态"""
        try:
            async with self._client(timeout=10) as client:
                response = await client.get("/api/tags")
                return response.status_code == 200
        except httpx.HTTPError as e:
            logger.warning(f"Ollama 健康检查失败: {e}")
            return False

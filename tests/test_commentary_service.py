"""
Tests for Ollama-backed commentary with a mocked HTTP transport.
"""

import json

import httpx
import pytest

from debate_live.core.errors import ErrorCode, LiveError
from debate_live.models.stream import Stream
from debate_live.schemas.live_schemas import Tally
from debate_live.services.commentary_service import CommentaryService, build_prompt
from debate_live.services.ollama_service import OllamaService


def ollama_with(handler) -> OllamaService:
    return OllamaService(base_url="http://ollama.test", timeout=5, transport=httpx.MockTransport(handler))


def reply(text: str):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/tags":
            return httpx.Response(200, json={"models": []})
        body = json.loads(request.content)
        return httpx.Response(200, json={"model": body["model"], "response": text, "done": True})
    return handler


class TestBuildPrompt:

    def test_includes_title_positions_and_votes(self):
        stream = Stream(id="s1", name="主会场", url="rtmp://x", debate_title="AI是否会取代教师",
                        left_position="会", right_position="不会")
        prompt = build_prompt(stream, Tally(12, 30))
        assert "AI是否会取代教师" in prompt
        assert "正方：会" in prompt
        assert "正方 12 票" in prompt
        assert "反方 30 票" in prompt

    def test_falls_back_to_stream_name(self):
        prompt = build_prompt(Stream(id="s1", name="主会场", url="rtmp://x"), Tally())
        assert prompt.startswith("辩题：主会场")


class TestOllamaService:

    @pytest.mark.asyncio
    async def test_generate_sends_system_prompt(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured.update(json.loads(request.content))
            return httpx.Response(200, json={"model": "qwen2.5:7b", "response": "  精彩  ", "done": True})

        result = await ollama_with(handler).generate("qwen2.5:7b", "辩题", system="你是解说")
        assert result.message == "精彩"
        assert captured == {"model": "qwen2.5:7b", "prompt": "辩题", "stream": False, "system": "你是解说"}

    @pytest.mark.asyncio
    async def test_health(self):
        assert await ollama_with(reply("")).check_health() is True

    @pytest.mark.asyncio
    async def test_health_when_unreachable(self):
        def handler(request):
            raise httpx.ConnectError("refused")

        assert await ollama_with(handler).check_health() is False


class TestCommentaryService:

    @pytest.mark.asyncio
    async def test_generate_and_list(self, db, streams):
        service = CommentaryService(db, ollama_with(reply("正方攻势猛烈")), "qwen2.5:7b")
        stream = db.get(Stream, "stream-001")

        content = await service.generate_commentary(stream, Tally(10, 2), live_id="live-a")

        assert content.content == "正方攻势猛烈"
        assert content.model_name == "qwen2.5:7b"
        assert content.live_id == "live-a"
        listed = service.list_commentary("stream-001")
        assert [c.id for c in listed] == [content.id]
        assert service.delete_commentary(content.id) is True
        assert service.delete_commentary(content.id) is False

    @pytest.mark.asyncio
    async def test_http_error_becomes_ai_unavailable(self, db, streams):
        def handler(request):
            return httpx.Response(500, json={"error": "model not loaded"})

        service = CommentaryService(db, ollama_with(handler), "qwen2.5:7b")
        with pytest.raises(LiveError) as exc_info:
            await service.generate_commentary(db.get(Stream, "stream-001"), Tally())
        assert exc_info.value.code == ErrorCode.AI_UNAVAILABLE

    @pytest.mark.asyncio
    async def test_empty_reply_rejected(self, db, streams):
        service = CommentaryService(db, ollama_with(reply("   ")), "qwen2.5:7b")
        with pytest.raises(LiveError) as exc_info:
            await service.generate_commentary(db.get(Stream, "stream-001"), Tally())
        assert exc_info.value.code == ErrorCode.AI_UNAVAILABLE

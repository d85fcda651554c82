"""
API依赖：进程内共享的服务实例
"""

from typing import Optional

from fastapi import HTTPException

from debate_live.core.config import settings
from debate_live.core.database import SessionLocal
from debate_live.core.errors import LiveError
from debate_live.services.live_coordinator import LiveCoordinator
from debate_live.services.ollama_service import OllamaService
from debate_live.services.websocket_service import WebSocketManager

# 使用全局实例
_manager: Optional[WebSocketManager] = None
_coordinator: Optional[LiveCoordinator] = None


def get_websocket_manager() -> WebSocketManager:
    """获取全局WebSocket管理器实例"""
    global _manager
    if _manager is None:
        _manager = WebSocketManager()
    return _manager


def get_live_coordinator() -> LiveCoordinator:
    """获取全局直播协调服务实例"""
    global _coordinator
    if _coordinator is None:
        _coordinator = LiveCoordinator.from_settings(settings, SessionLocal, get_websocket_manager())
    return _coordinator


def get_ollama_service() -> OllamaService:
    return OllamaService()


def http_error(error: LiveError) -> HTTPException:
    """核心错误转换为HTTP错误"""
    return HTTPException(status_code=error.status_code, detail=error.to_detail())

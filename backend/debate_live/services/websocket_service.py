"""
WebSocket连接管理服务（实时广播）
"""

import json
import logging
from typing import List

from fastapi import WebSocket
from starlette.websockets import WebSocketState

from debate_live.core.utils import epoch_millis
from debate_live.schemas.event_schemas import BroadcastEvent

logger = logging.getLogger(__name__)


class WebSocketManager:
    """WebSocket连接管理器

    连接只保存在内存中，进程结束即失效；广播尽力而为，不重试。
    """

    def __init__(self):
        # 大屏、小程序与后台共用一个订阅集合
        self.connections: List[WebSocket] = []

    @property
    def connection_count(self) -> int:
        return len(self.connections)

    async def connect(self, websocket: WebSocket):
        """接受连接并加入订阅集合"""
        await websocket.accept()
        self.register(websocket)

    def register(self, websocket: WebSocket):
        # 检查是否已存在，避免重复连接
        if websocket not in self.connections:
            self.connections.append(websocket)
            logger.info(f"新连接加入，当前连接数: {len(self.connections)}")

    def disconnect(self, websocket: WebSocket):
        """断开连接"""
        if websocket in self.connections:
            self.connections.remove(websocket)
            logger.info(f"连接断开，当前连接数: {len(self.connections)}")

    async def send_personal_message(self, message: dict, websocket: WebSocket) -> bool:
        """发送个人消息"""
        try:
            await websocket.send_text(json.dumps(message, ensure_ascii=False))
            return True
        except Exception as e:
            logger.warning(f"发送个人消息失败: {e}")
            return False

    async def send_snapshot(self, websocket: WebSocket, snapshot: dict):
        """向新连接发送当前完整状态，无需等待下一次增量事件"""
        sent = await self.send_personal_message({
            "type": "state",
            "data": snapshot,
            "timestamp": epoch_millis(),
        }, websocket)
        if not sent:
            self.disconnect(websocket)

    async def publish(self, event: BroadcastEvent) -> int:
        """向所有订阅者广播事件，返回成功发送数"""
        return await self.broadcast(event.to_envelope())

    async def broadcast(self, message: dict) -> int:
        """向所有打开的连接广播消息，移除已关闭或发送失败的连接"""
        connections = self.connections.copy()  # 创建副本进行迭代
        if not connections:
            return 0

        message_text = json.dumps(message, ensure_ascii=False)
        failed_connections = []
        success_count = 0

        for connection in connections:
            if connection.client_state != WebSocketState.CONNECTED:
                failed_connections.append(connection)
                continue
            try:
                await connection.send_text(message_text)
                success_count += 1
            except Exception as e:
                logger.warning(f"广播消息失败: {e}")
                failed_connections.append(connection)

        # 移除失败的连接
        for failed_connection in failed_connections:
            if failed_connection in self.connections:
                self.connections.remove(failed_connection)

        if failed_connections:
            logger.info(f"移除 {len(failed_connections)} 个失效连接，剩余连接数: {len(self.connections)}")

        logger.debug(f"📡 广播 {message.get('type', 'unknown')}: {success_count} 成功, {len(failed_connections)} 失败")
        return success_count

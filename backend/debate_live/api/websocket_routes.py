"""
WebSocket API路由
"""

import json
import logging
import uuid

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from debate_live.api.dependencies import get_live_coordinator
from debate_live.core.config import settings
from debate_live.core.utils import epoch_millis
from debate_live.services.live_coordinator import LiveCoordinator

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/live")
async def websocket_live_endpoint(
    websocket: WebSocket,
    coordinator: LiveCoordinator = Depends(get_live_coordinator),
):
    """大屏 / 小程序 / 后台共用的实时推送端点"""
    manager = coordinator.manager
    viewer_id = uuid.uuid4().hex
    await manager.connect(websocket)

    try:
        # 发送欢迎消息和当前完整状态
        await manager.send_personal_message({
            "type": "connected",
            "data": {
                "clientId": viewer_id,
                "heartbeatInterval": settings.WS_HEARTBEAT_INTERVAL,
            },
            "timestamp": epoch_millis(),
        }, websocket)
        await coordinator.send_snapshot(websocket)

        # 监听消息
        while True:
            data = await websocket.receive_text()
            try:
                message_data = json.loads(data)
            except json.JSONDecodeError:
                logger.warning(f"收到无效JSON消息: {data[:100]}")
                continue
            if not isinstance(message_data, dict):
                continue

            message_type = message_data.get("type")
            if message_type == "ping":
                await manager.send_personal_message({
                    "type": "pong",
                    "timestamp": message_data.get("timestamp", epoch_millis()),
                }, websocket)

            elif message_type == "join-stream":
                stream_id = message_data.get("streamId")
                if stream_id:
                    coordinator.presence.join(stream_id, viewer_id)
                    await coordinator.publish_online_counts()

            elif message_type == "leave-stream":
                stream_id = message_data.get("streamId")
                if stream_id:
                    coordinator.presence.leave(stream_id, viewer_id)
                    await coordinator.publish_online_counts()

            elif message_type == "get-state":
                await coordinator.send_snapshot(websocket)

            else:
                logger.debug(f"忽略未知消息类型: {message_type}")

    except WebSocketDisconnect:
        pass
    except Exception:
        logger.exception("WebSocket错误")
    finally:
        manager.disconnect(websocket)
        if coordinator.presence.leave_all(viewer_id):
            await coordinator.publish_online_counts()

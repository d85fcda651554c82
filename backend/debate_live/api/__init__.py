"""
API路由模块
"""

from fastapi import APIRouter
from .stream_routes import router as stream_router
from .judge_routes import router as judge_router
from .participant_routes import router as participant_router
from .live_routes import router as live_router
from .vote_routes import router as vote_router
from .statistics_routes import router as statistics_router
from .ai_routes import router as ai_router
from .debate_flow_routes import router as debate_flow_router
from .websocket_routes import router as ws_router

# 创建主路由器
api_router = APIRouter()

# 注册各个功能模块的路由
api_router.include_router(stream_router, prefix="/streams", tags=["直播流管理"])
api_router.include_router(judge_router, prefix="/judges", tags=["评委管理"])
api_router.include_router(participant_router, prefix="/participants", tags=["用户管理"])
api_router.include_router(live_router, prefix="/live", tags=["直播控制"])
api_router.include_router(vote_router, prefix="/votes", tags=["投票"])
api_router.include_router(statistics_router, prefix="/statistics", tags=["数据统计"])
api_router.include_router(ai_router, prefix="/ai", tags=["AI解说"])
api_router.include_router(debate_flow_router, prefix="/debate-flow", tags=["辩论流程"])
api_router.include_router(ws_router, prefix="/ws", tags=["WebSocket"])

"""
数据库配置
"""
import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from debate_live.core.config import settings

logger = logging.getLogger(__name__)

connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(
    settings.DATABASE_URL,
    connect_args=connect_args,
    echo=False  # 设置为True可以看到SQL查询日志
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """获取数据库会话"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def import_models():
    """导入所有模型，确保表注册到 Base.metadata"""
    from debate_live.models.stream import Stream  # noqa: F401
    from debate_live.models.participant import Participant, VoteRecord  # noqa: F401
    from debate_live.models.judge import Judge  # noqa: F401
    from debate_live.models.tally import StreamTally, DailyStat, PlatformCounter  # noqa: F401
    from debate_live.models.live_session import LiveSessionRecord  # noqa: F401
    from debate_live.models.ai_content import AIContent  # noqa: F401
    from debate_live.models.debate_flow import DebateFlow  # noqa: F401


async def init_db(bind=None):
    """初始化数据库"""
    import_models()

    # 创建所有表
    Base.metadata.create_all(bind=bind or engine)
    logger.info("数据库初始化完成")

"""日志配置"""

import logging

from rich.console import Console
from rich.logging import RichHandler

from debate_live.core.config import Settings


def setup_logging(settings: Settings) -> None:
    """使用 Rich handler 配置应用日志"""

    level = getattr(logging, settings.LOG_LEVEL, logging.INFO)

    console = Console(force_terminal=True, width=120)
    rich_handler = RichHandler(
        console=console,
        show_time=True,
        show_level=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=False,
        tracebacks_width=120,
    )
    rich_handler.setFormatter(
        logging.Formatter(fmt="%(message)s", datefmt="[%Y-%m-%d %H:%M:%S]")
    )

    # force=True: uvicorn 会先行设定 root logger，需强制覆盖
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%Y-%m-%d %H:%M:%S]",
        handlers=[rich_handler],
        force=True,
    )

    # 降低 uvicorn access log 噪音
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        f"日志级别: {settings.LOG_LEVEL} | 调试模式: {settings.DEBUG}"
    )

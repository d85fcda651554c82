"""
辩论直播管理后台
"""

__version__ = "1.0.0"

"""
在线人数统计
"""

from typing import Dict, Set


class PresenceTracker:
    """按直播流统计在线观众"""

    def __init__(self):
        self._viewers: Dict[str, Set[str]] = {}
        self._overrides: Dict[str, int] = {}

    def join(self, stream_id: str, viewer_id: str) -> int:
        self._viewers.setdefault(stream_id, set()).add(viewer_id)
        self._overrides.pop(stream_id, None)
        return self.get_online_count(stream_id)

    def leave(self, stream_id: str, viewer_id: str) -> int:
        viewers = self._viewers.get(stream_id)
        if viewers is not None:
            viewers.discard(viewer_id)
            if not viewers:
                del self._viewers[stream_id]
        self._overrides.pop(stream_id, None)
        return self.get_online_count(stream_id)

    def leave_all(self, viewer_id: str) -> list:
        """连接断开时退出所有直播流，返回受影响的流"""
        affected = [sid for sid, viewers in self._viewers.items() if viewer_id in viewers]
        for stream_id in affected:
            self.leave(stream_id, viewer_id)
        return affected

    def set_online_count(self, stream_id: str, count: int):
        """管理员校正；下一次加入/离开后恢复真实统计"""
        self._overrides[stream_id] = max(0, int(count))

    def get_online_count(self, stream_id: str) -> int:
        if stream_id in self._overrides:
            return self._overrides[stream_id]
        return len(self._viewers.get(stream_id, ()))

    def forget(self, stream_id: str):
        self._viewers.pop(stream_id, None)
        self._overrides.pop(stream_id, None)

    def counts(self) -> Dict[str, int]:
        stream_ids = set(self._viewers) | set(self._overrides)
        return {sid: self.get_online_count(sid) for sid in sorted(stream_ids)}

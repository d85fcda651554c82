"""
直播状态协调服务

负责每个直播流的 开播 → 直播中 → 关播 状态流转、投票窗口与自动关播定时器、
投票准入、票数更新以及实时广播。同一直播流的所有状态修改都在该流的锁内完成；
事件在锁内按修改顺序进入该流的发件队列，释放锁后再按顺序发出。
"""

import asyncio
import logging
import uuid
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Deque, Dict, List, Optional

from sqlalchemy.orm import Session

from debate_live.core.errors import ErrorCode, LiveError
from debate_live.core.utils import format_timestamp_with_timezone, percentages, utc_now
from debate_live.models.live_session import LiveSessionRecord
from debate_live.schemas.event_schemas import (
    AIStatusChanged,
    BroadcastEvent,
    LiveStatusChanged,
    StreamOnlineUpdate,
    VoteWindowOpened,
    VotesUpdated,
)
from debate_live.schemas.live_schemas import (
    AdminVoteUpdateResponse,
    DashboardInfo,
    LiveSessionInfo,
    Tally,
    TallyResponse,
)
from debate_live.schemas.participant_schemas import JudgeConfig
from debate_live.services.judge_service import JudgeService
from debate_live.services.participant_service import ParticipantService
from debate_live.services.presence_service import PresenceTracker
from debate_live.services.session_registry import SessionKey, SessionRegistry
from debate_live.services.statistics_service import StatisticsService
from debate_live.services.stream_service import StreamService
from debate_live.services.vote_aggregator import VoteAggregator
from debate_live.services.vote_guard import VoteAdmissionGuard
from debate_live.services.vote_ledger import VoteLedger
from debate_live.services.websocket_service import WebSocketManager

logger = logging.getLogger(__name__)


@dataclass
class StreamLiveState:
    """单个直播流的直播状态"""
    stream_id: str
    is_live: bool = False
    live_id: Optional[str] = None
    stream_url: Optional[str] = None
    start_time: Optional[datetime] = None
    stop_time: Optional[datetime] = None
    stop_reason: Optional[str] = None
    # 每次开播 +1，旧场次的定时器据此失效
    generation: int = 0
    timers: Dict[str, asyncio.Task] = field(default_factory=dict)
    ai_status: str = "stopped"
    ai_session_id: Optional[str] = None
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    # 待发送事件；锁内入队，锁外按序发送
    outbox: Deque[BroadcastEvent] = field(default_factory=deque)
    send_lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    @property
    def session_key(self) -> Optional[SessionKey]:
        if not self.is_live or self.live_id is None:
            return None
        return (self.stream_id, self.live_id)


class LiveCoordinator:
    """直播/投票核心服务（进程内唯一实例）"""

    def __init__(
        self,
        session_factory: Callable[[], Session],
        manager: WebSocketManager,
        presence: Optional[PresenceTracker] = None,
        vote_window_open_offset: float = 45,
        vote_window_close_offset: float = 60,
        auto_stop_after: float = 60,
        audience_vote_weight: int = 2,
        judge_default_vote_weight: int = 10,
        max_judges: int = 3,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._session_factory = session_factory
        self.manager = manager
        self.presence = presence or PresenceTracker()
        self.auto_stop_after = auto_stop_after
        self.judge_default_vote_weight = judge_default_vote_weight
        self.max_judges = max_judges
        self._clock = clock

        self.ledger = VoteLedger(session_factory)
        self.registry = SessionRegistry()
        self.guard = VoteAdmissionGuard(
            self.registry,
            window_open_offset=vote_window_open_offset,
            window_close_offset=vote_window_close_offset,
            audience_weight=audience_vote_weight,
        )
        self.aggregator = VoteAggregator(
            self.ledger,
            self.presence,
            self.load_judges,
            audience_weight=audience_vote_weight,
        )
        self._states: Dict[str, StreamLiveState] = {}

    @classmethod
    def from_settings(cls, settings, session_factory, manager, presence=None) -> "LiveCoordinator":
        return cls(
            session_factory,
            manager,
            presence,
            vote_window_open_offset=settings.VOTE_WINDOW_OPEN_OFFSET,
            vote_window_close_offset=settings.VOTE_WINDOW_CLOSE_OFFSET,
            auto_stop_after=settings.AUTO_STOP_AFTER,
            audience_vote_weight=settings.AUDIENCE_VOTE_WEIGHT,
            judge_default_vote_weight=settings.JUDGE_DEFAULT_VOTE_WEIGHT,
            max_judges=settings.MAX_JUDGES,
        )

    # ==================== 直播生命周期 ====================

    async def start_live(self, stream_id: str, auto_start_ai: bool = False) -> LiveSessionInfo:
        """开始直播：新建场次与投票会话，本场票数归零，当前票数保持不变"""
        with self._session_factory() as db:
            stream = StreamService(db).require_stream(stream_id)
            if not stream.enabled:
                raise LiveError(ErrorCode.STREAM_DISABLED, "该直播流已禁用，无法开始直播")
            stream_url = stream.url

        state = self._state(stream_id)
        try:
            async with state.lock:
                if state.is_live:
                    raise LiveError(ErrorCode.ALREADY_LIVE, "该直播流已经在进行中")

                self._cancel_timers(state)
                state.generation += 1
                state.live_id = str(uuid.uuid4())
                state.stream_url = stream_url
                state.start_time = self._clock()
                state.stop_time = None
                state.stop_reason = None
                state.is_live = True

                self.registry.create(stream_id, state.live_id)
                self.ledger.reset_session(stream_id)
                self._sink(self._record_session_start(state), "保存直播场次")
                self._schedule_timers(state)

                self._emit(state, LiveStatusChanged.started(
                    stream_id, state.live_id, state.start_time, stream_url
                ))
                self._emit(state, self._votes_event(state, "live-start"))
                if auto_start_ai:
                    self._start_ai_locked(state)

                logger.info(f"✅ 直播已开始: 流 {stream_id}, 场次 {state.live_id}")
                return self._info(state)
        finally:
            await self._flush(state)

    async def stop_live(self, stream_id: str, reason: str = "manual") -> LiveSessionInfo:
        """停止直播；未在直播时直接返回当前状态"""
        state = self._states.get(stream_id)
        if state is None:
            return LiveSessionInfo(stream_id=stream_id)
        try:
            async with state.lock:
                if state.is_live:
                    self._stop_locked(state, reason)
                return self._info(state)
        finally:
            await self._flush(state)

    async def forget_stream(self, stream_id: str):
        """直播流被删除：先关播，再丢弃该流的票数与直播状态"""
        state = self._states.get(stream_id)
        if state is not None:
            try:
                async with state.lock:
                    if state.is_live:
                        self._stop_locked(state, "stream-deleted")
                    elif state.ai_status == "running":
                        self._stop_ai_locked(state)
                    self._cancel_timers(state)
            finally:
                await self._flush(state)
            self._states.pop(stream_id, None)
        self.ledger.forget(stream_id)
        self.presence.forget(stream_id)
        logger.info(f"🗑️ 已清理直播流 {stream_id} 的票数与直播状态")

    def _stop_locked(self, state: StreamLiveState, reason: str):
        stream_id = state.stream_id
        live_id = state.live_id
        stop_time = self._clock()

        state.is_live = False
        state.stop_time = stop_time
        state.stop_reason = reason
        self._cancel_timers(state)

        # 先把本场票数写入每日统计，再清空当前票数与本场票数
        session = self.ledger.session(stream_id)
        self._sink(
            lambda db: StatisticsService(db).accumulate_daily(
                stream_id, stop_time.date(), session.left_votes, session.right_votes
            ),
            "累加每日统计",
        )
        self.ledger.reset_current(stream_id)
        self.ledger.reset_session(stream_id)
        self.registry.discard((stream_id, live_id))
        self._sink(self._record_session_stop(live_id, stop_time, reason, session), "更新直播场次")

        # AI解说与直播一起停止
        if state.ai_status == "running":
            self._stop_ai_locked(state)

        self._emit(state, LiveStatusChanged.stopped(stream_id, live_id, stop_time, reason))
        self._emit(state, self._votes_event(state, "live-end-reset"))
        logger.info(
            f"⏹️ 直播已停止: 流 {stream_id}, 场次 {live_id}, 原因 {reason}, "
            f"本场 {session.left_votes}:{session.right_votes}"
        )

    # ==================== 定时器 ====================

    def _schedule_timers(self, state: StreamLiveState):
        generation = state.generation
        state.timers["vote_window"] = asyncio.create_task(self._fire_after(
            self.guard.window_open_offset, state.stream_id, generation, self._on_vote_window_open
        ))
        state.timers["auto_stop"] = asyncio.create_task(self._fire_after(
            self.auto_stop_after, state.stream_id, generation, self._on_auto_stop
        ))

    def _cancel_timers(self, state: StreamLiveState):
        current = asyncio.current_task()
        for task in state.timers.values():
            # 自动关播定时器自身触发关播时不能取消自己
            if task is not current and not task.done():
                task.cancel()
        state.timers.clear()

    async def _fire_after(self, delay: float, stream_id: str, generation: int, action):
        await asyncio.sleep(delay)
        state = self._states.get(stream_id)
        if state is None:
            return
        try:
            async with state.lock:
                # 已关播或已重新开播：旧定时器静默失效
                if not state.is_live or state.generation != generation:
                    return
                try:
                    action(state)
                except Exception:
                    logger.exception(f"直播流 {stream_id} 定时任务执行失败")
        finally:
            await self._flush(state)

    def _on_vote_window_open(self, state: StreamLiveState):
        _, closes_at = self.guard.window_bounds(state.start_time)
        self._emit(state, VoteWindowOpened(
            stream_id=state.stream_id,
            live_id=state.live_id,
            closes_at=format_timestamp_with_timezone(closes_at),
        ))

    def _on_auto_stop(self, state: StreamLiveState):
        self._stop_locked(state, "auto-timeout")

    async def shutdown(self):
        """进程退出时取消所有定时器"""
        for state in self._states.values():
            self._cancel_timers(state)

    # ==================== 投票 ====================

    async def submit_vote(self, stream_id: str, participant_id: str, side: str) -> TallyResponse:
        """观众/评委投票：每人每场一次，票数全部投给一方"""
        if side not in ("left", "right"):
            raise LiveError(ErrorCode.INVALID_REQUEST, "side 必须为 'left' 或 'right'")

        with self._session_factory() as db:
            participant_status = ParticipantService(db).get_status(participant_id)

        state = self._states.get(stream_id)
        if state is None:
            # 从未开播过的流不建立状态，准入顺序与 admit 一致
            self.guard.check_participant(participant_status)
            self.guard.check_live(None, None)

        judges = self.load_judges(stream_id)
        try:
            async with state.lock:
                now = self._clock()
                try:
                    admission = self.guard.admit(
                        state.session_key,
                        state.start_time if state.is_live else None,
                        participant_id,
                        participant_status,
                        judges,
                        now,
                    )
                except LiveError as e:
                    # 窗口已过但还没关播，兜底关播
                    if e.code == ErrorCode.VOTING_WINDOW_CLOSED and state.is_live:
                        self._stop_locked(state, "vote-window-ended")
                    raise

                weight = admission.weight
                left_delta, right_delta = (weight, 0) if side == "left" else (0, weight)
                current = self.ledger.add_current(stream_id, left_delta, right_delta)
                self.ledger.add_session(stream_id, left_delta, right_delta)

                live_id = state.live_id
                self._sink(
                    lambda db: ParticipantService(db).append_vote_history(
                        participant_id, stream_id, live_id, side, weight, now
                    ),
                    "记录投票历史",
                )
                global_total = self._sink(
                    lambda db: StatisticsService(db).increment_global_total(weight),
                    "累加平台总票数",
                )

                logger.info(
                    f"🗳️ 投票成功: 流 {stream_id}, 用户 {participant_id}, "
                    f"{'评委' if admission.as_judge else '观众'} {side} +{weight}"
                )
                self._emit(state, self._votes_event(state, "user", global_total))
                return self._tally_response(stream_id, current)
        finally:
            await self._flush(state)

    # ==================== 后台票数管理 ====================

    async def update_votes(
        self,
        stream_id: str,
        action: str,
        left_votes: int = 0,
        right_votes: int = 0,
        reason: Optional[str] = None,
    ) -> AdminVoteUpdateResponse:
        """管理员设置/增加/重置当前票数，不经过投票准入，也不影响本场票数"""
        self._require_stream(stream_id)
        state = self._state(stream_id)
        try:
            async with state.lock:
                before = self.ledger.current(stream_id)
                if action == "set":
                    after = self.ledger.set_current(stream_id, left_votes, right_votes)
                elif action == "add":
                    after = self.ledger.add_current(stream_id, left_votes, right_votes)
                elif action == "reset":
                    after = self.ledger.reset_current(stream_id)
                else:
                    raise LiveError(ErrorCode.INVALID_REQUEST, "action 参数必须是: set / add / reset")

                self._emit(state, self._votes_event(state, "admin"))
                logger.info(
                    f"📊 投票数据已更新 ({action}) [{stream_id}] reason={reason or ''}: "
                    f"{before.left_votes}:{before.right_votes} → {after.left_votes}:{after.right_votes}"
                )
                return AdminVoteUpdateResponse(
                    before_update=self._tally_response(stream_id, before),
                    after_update=self._tally_response(stream_id, after),
                )
        finally:
            await self._flush(state)

    async def cap_if_exceeded(self, stream_id: str) -> dict:
        """按在线人数计算上限，超出时按比例压缩"""
        self._require_stream(stream_id)
        state = self._state(stream_id)
        try:
            async with state.lock:
                ceiling = self.aggregator.ceiling(stream_id)
                capped = self.aggregator.cap_if_exceeded(stream_id, include_session=state.is_live)
                if capped:
                    self._emit(state, self._votes_event(state, "cap"))
                current = self.ledger.current(stream_id)
                return {
                    "streamId": stream_id,
                    "ceiling": ceiling,
                    "capped": capped,
                    "leftVotes": current.left_votes,
                    "rightVotes": current.right_votes,
                    "totalVotes": current.total_votes,
                }
        finally:
            await self._flush(state)

    # ==================== AI解说状态 ====================

    async def start_ai(self, stream_id: str) -> LiveSessionInfo:
        self._require_stream(stream_id)
        state = self._state(stream_id)
        try:
            async with state.lock:
                if state.ai_status != "running":
                    self._start_ai_locked(state)
                return self._info(state)
        finally:
            await self._flush(state)

    async def stop_ai(self, stream_id: str) -> LiveSessionInfo:
        state = self._states.get(stream_id)
        if state is None:
            return self.get_status(stream_id)
        try:
            async with state.lock:
                if state.ai_status == "running":
                    self._stop_ai_locked(state)
                return self._info(state)
        finally:
            await self._flush(state)

    def is_ai_running(self, stream_id: str) -> bool:
        state = self._states.get(stream_id)
        return state is not None and state.ai_status == "running"

    def _start_ai_locked(self, state: StreamLiveState):
        state.ai_status = "running"
        state.ai_session_id = str(uuid.uuid4())
        self._emit(state, AIStatusChanged(
            stream_id=state.stream_id, status="running", ai_session_id=state.ai_session_id
        ))
        logger.info(f"🤖 流 {state.stream_id} AI解说已启动")

    def _stop_ai_locked(self, state: StreamLiveState):
        state.ai_status = "stopped"
        state.ai_session_id = None
        self._emit(state, AIStatusChanged(stream_id=state.stream_id, status="stopped"))
        logger.info(f"🤖 流 {state.stream_id} AI解说已停止")

    # ==================== 查询 ====================

    def get_status(self, stream_id: str) -> LiveSessionInfo:
        state = self._states.get(stream_id)
        if state is None:
            return LiveSessionInfo(stream_id=stream_id, online_count=self.presence.get_online_count(stream_id))
        return self._info(state)

    def list_statuses(self) -> List[LiveSessionInfo]:
        with self._session_factory() as db:
            stream_ids = [s.id for s in StreamService(db).list_streams()]
        return [self.get_status(sid) for sid in stream_ids]

    def is_live(self, stream_id: str) -> bool:
        state = self._states.get(stream_id)
        return state is not None and state.is_live

    def current_live_id(self, stream_id: str) -> Optional[str]:
        state = self._states.get(stream_id)
        return state.live_id if state is not None and state.is_live else None

    def dashboard(self, stream_id: str) -> DashboardInfo:
        """后台仪表盘：直播状态、票数、在线人数与辩题"""
        with self._session_factory() as db:
            stream = StreamService(db).require_stream(stream_id)
            name = stream.name
            topic = stream.debate_title or stream.name
            left_position = stream.left_position
            right_position = stream.right_position

        info = self.get_status(stream_id)
        current = self.ledger.current(stream_id)
        session = self.ledger.session(stream_id) if info.is_live else None
        return DashboardInfo(
            stream_id=stream_id,
            name=name,
            is_live=info.is_live,
            live_id=info.live_id if info.is_live else None,
            start_time=info.start_time if info.is_live else None,
            ai_status=info.ai_status,
            left_votes=current.left_votes,
            right_votes=current.right_votes,
            total_votes=current.total_votes,
            session_left_votes=session.left_votes if session else None,
            session_right_votes=session.right_votes if session else None,
            viewers=info.online_count,
            debate_topic=topic,
            left_position=left_position,
            right_position=right_position,
        )

    def current_tally(self, stream_id: str) -> TallyResponse:
        return self._tally_response(stream_id, self.ledger.current(stream_id))

    def display_ratio(self, stream_id: str) -> TallyResponse:
        """大屏票比：直播中为本场票数，未直播一律 0:0"""
        tally = self.ledger.session(stream_id) if self.is_live(stream_id) else Tally()
        return self._tally_response(stream_id, tally)

    def global_totals(self) -> dict:
        with self._session_factory() as db:
            global_total = StatisticsService(db).get_global_total()
        return {"allTotalVotes": self.aggregator.global_total(), "globalTotalVotes": global_total}

    def live_history(self, stream_id: str, limit: int = 50) -> List[LiveSessionInfo]:
        """直播场次审计记录，最近的在前"""
        with self._session_factory() as db:
            records = db.query(LiveSessionRecord).filter(
                LiveSessionRecord.stream_id == stream_id
            ).order_by(LiveSessionRecord.start_time.desc()).limit(limit).all()
            return [
                LiveSessionInfo(
                    stream_id=r.stream_id,
                    live_id=r.live_id,
                    is_live=self.current_live_id(stream_id) == r.live_id,
                    start_time=r.start_time,
                    stop_time=r.stop_time,
                    stop_reason=r.stop_reason,
                )
                for r in records
            ]

    def snapshot(self) -> dict:
        """新连接的完整状态：各直播流票数、直播状态、AI状态、在线人数"""
        with self._session_factory() as db:
            streams = [(s.id, s.name, s.enabled) for s in StreamService(db).list_streams()]
            global_total = StatisticsService(db).get_global_total()

        items = []
        for stream_id, name, enabled in streams:
            info = self.get_status(stream_id)
            # 直播中展示本场票数，与大屏一致
            tally = self.ledger.session(stream_id) if info.is_live else self.ledger.current(stream_id)
            items.append({
                "streamId": stream_id,
                "name": name,
                "enabled": enabled,
                "isLive": info.is_live,
                "liveId": info.live_id if info.is_live else None,
                "startTime": format_timestamp_with_timezone(info.start_time) if info.is_live else None,
                "leftVotes": tally.left_votes,
                "rightVotes": tally.right_votes,
                "totalVotes": tally.total_votes,
                "aiStatus": info.ai_status,
                "onlineCount": info.online_count,
            })
        return {
            "streams": items,
            "allTotalVotes": self.aggregator.global_total(),
            "globalTotalVotes": global_total,
            "streamOnlineCounts": self.presence.counts(),
        }

    async def send_snapshot(self, websocket):
        await self.manager.send_snapshot(websocket, self.snapshot())

    async def publish_online_counts(self):
        await self.manager.publish(StreamOnlineUpdate(stream_online_counts=self.presence.counts()))

    def load_judges(self, stream_id: str) -> List[JudgeConfig]:
        with self._session_factory() as db:
            return JudgeService(db, self.max_judges, self.judge_default_vote_weight).get_judges(stream_id)

    # ==================== 内部工具 ====================

    def _state(self, stream_id: str) -> StreamLiveState:
        if stream_id not in self._states:
            self._states[stream_id] = StreamLiveState(stream_id=stream_id)
        return self._states[stream_id]

    def _emit(self, state: StreamLiveState, event: BroadcastEvent):
        state.outbox.append(event)

    async def _flush(self, state: StreamLiveState):
        """释放流锁后按入队顺序发送；send_lock 保证多个发送方之间不乱序"""
        async with state.send_lock:
            while state.outbox:
                await self.manager.publish(state.outbox.popleft())

    def _require_stream(self, stream_id: str):
        with self._session_factory() as db:
            StreamService(db).require_stream(stream_id)

    def _info(self, state: StreamLiveState) -> LiveSessionInfo:
        return LiveSessionInfo(
            stream_id=state.stream_id,
            live_id=state.live_id,
            is_live=state.is_live,
            start_time=state.start_time,
            stop_time=state.stop_time,
            stop_reason=state.stop_reason,
            ai_status=state.ai_status,
            online_count=self.presence.get_online_count(state.stream_id),
        )

    def _tally_response(self, stream_id: str, tally: Tally) -> TallyResponse:
        left_pct, right_pct = percentages(tally.left_votes, tally.right_votes)
        return TallyResponse(
            stream_id=stream_id,
            left_votes=tally.left_votes,
            right_votes=tally.right_votes,
            total_votes=tally.total_votes,
            all_total_votes=self.aggregator.global_total(),
            left_percentage=left_pct,
            right_percentage=right_pct,
        )

    def _votes_event(self, state: StreamLiveState, source: str, global_total: Optional[int] = None) -> VotesUpdated:
        current = self.ledger.current(state.stream_id)
        return VotesUpdated(
            stream_id=state.stream_id,
            left_votes=current.left_votes,
            right_votes=current.right_votes,
            all_total_votes=self.aggregator.global_total(),
            global_total_votes=global_total,
            source=source,
            session=self.ledger.session(state.stream_id) if state.is_live else None,
        )

    def _record_session_start(self, state: StreamLiveState):
        def record(db: Session):
            db.add(LiveSessionRecord(
                live_id=state.live_id,
                stream_id=state.stream_id,
                start_time=state.start_time,
            ))
            db.commit()
        return record

    def _record_session_stop(self, live_id: str, stop_time: datetime, reason: str, session: Tally):
        def record(db: Session):
            row = db.get(LiveSessionRecord, live_id)
            if row is None:
                return
            row.stop_time = stop_time
            row.stop_reason = reason
            row.session_left = session.left_votes
            row.session_right = session.right_votes
            db.commit()
        return record

    def _sink(self, action: Callable[[Session], object], description: str):
        """写入外部持久化；失败只记日志，不回滚内存状态"""
        try:
            with self._session_factory() as db:
                return action(db)
        except Exception:
            logger.exception(f"{description}失败")
            return None

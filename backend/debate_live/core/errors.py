"""
核心错误码
"""

import enum


class ErrorCode(str, enum.Enum):
    """直播/投票操作失败的错误码"""
    STREAM_NOT_FOUND = "StreamNotFound"
    STREAM_DISABLED = "StreamDisabled"
    ALREADY_LIVE = "AlreadyLive"
    STREAM_NOT_LIVE = "StreamNotLive"
    PARTICIPANT_BANNED = "ParticipantBanned"
    PARTICIPANT_NOT_FOUND = "ParticipantNotFound"
    ALREADY_VOTED = "AlreadyVoted"
    VOTING_WINDOW_NOT_OPEN = "VotingWindowNotOpen"
    VOTING_WINDOW_CLOSED = "VotingWindowClosed"
    INVALID_REQUEST = "InvalidRequest"
    AI_UNAVAILABLE = "AIUnavailable"


# 对应的HTTP状态码
HTTP_STATUS = {
    ErrorCode.STREAM_NOT_FOUND: 404,
    ErrorCode.PARTICIPANT_NOT_FOUND: 404,
    ErrorCode.STREAM_DISABLED: 403,
    ErrorCode.PARTICIPANT_BANNED: 403,
    ErrorCode.VOTING_WINDOW_NOT_OPEN: 403,
    ErrorCode.VOTING_WINDOW_CLOSED: 403,
    ErrorCode.ALREADY_LIVE: 409,
    ErrorCode.STREAM_NOT_LIVE: 409,
    ErrorCode.ALREADY_VOTED: 409,
    ErrorCode.INVALID_REQUEST: 400,
    ErrorCode.AI_UNAVAILABLE: 502,
}


class LiveError(ValueError):
    """直播核心操作被拒绝"""

    def __init__(self, code: ErrorCode, message: str):
        super().__init__(message)
        self.code = code
        self.message = message

    @property
    def status_code(self) -> int:
        return HTTP_STATUS.get(self.code, 400)

    def to_detail(self) -> dict:
        return {"code": self.code.value, "message": self.message}

"""
业务错误类型
服务层抛出，由应用级异常处理器统一转换为 HTTP 响应；任何错误都不在内部重试
"""
from typing import Any, Dict, List, Optional


class ErrorType:
    """错误分类"""

    VALIDATION_ERROR = "validation_error"
    ROOM_UNAVAILABLE = "room_unavailable"
    NOT_FOUND = "not_found"
    INVALID_STATE = "invalid_state"
    UNAVAILABLE = "unavailable"


class PousadaError(Exception):
    """
    业务错误基类

    Attributes:
        error_type: 错误分类（ErrorType）
        message: 面向用户的错误信息
        status_code: 对应的 HTTP 状态码
        errors: 字段级错误明细
    """

    error_type = ErrorType.VALIDATION_ERROR
    status_code = 400

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        self.message = message
        self.errors = errors or []
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        result = {"error_type": self.error_type, "message": self.message}
        if self.errors:
            result["errors"] = self.errors
        return result


class ValidationError(PousadaError, ValueError):
    """输入不合法或违反约束（如入住时间不早于离店时间）"""

    error_type = ErrorType.VALIDATION_ERROR
    status_code = 400


class RoomUnavailableError(PousadaError):
    """房间在请求的时间段已被预订"""

    error_type = ErrorType.ROOM_UNAVAILABLE
    status_code = 409


class NotFoundError(PousadaError, LookupError):
    """引用的对象不存在"""

    error_type = ErrorType.NOT_FOUND
    status_code = 404


class InvalidStateError(PousadaError):
    """对象当前状态不允许该操作"""

    error_type = ErrorType.INVALID_STATE
    status_code = 409


class InvalidReservationStateError(InvalidStateError):
    """预订不处于所需状态（如对已退房的预订再次退房）"""


class StoreUnavailableError(PousadaError):
    """数据库不可用或事务失败，调用方可稍后重试"""

    error_type = ErrorType.UNAVAILABLE
    status_code = 503

"""
基础 Schema 模块
"""
import traceback
from typing import Any, Generic, TypeVar, Optional
from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class BaseResponse(BaseModel, Generic[T]):
    """统一响应格式"""
    success: bool = True
    message: str = "操作成功"
    data: Optional[T] = None

    model_config = ConfigDict(from_attributes=True)


class ErrorDetails(BaseModel):
    """异常诊断信息（仅供内部管理后台使用）"""
    name: str
    cause: Optional[Any] = None


class ErrorResponse(BaseModel):
    """统一错误响应格式"""
    success: bool = False
    message: str
    error: str
    stack: Optional[str] = None
    details: Optional[ErrorDetails] = None

    @classmethod
    def from_exception(cls, message: str, exc: BaseException, include_stack: bool = True) -> "ErrorResponse":
        """由异常构造错误响应，附带异常类型、cause 与堆栈"""
        stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)) if include_stack else None
        cause = exc.__cause__
        return cls(
            message=message,
            error=str(exc) or type(exc).__name__,
            stack=stack,
            details=ErrorDetails(
                name=type(exc).__name__,
                cause=str(cause) if cause is not None else None,
            ),
        )

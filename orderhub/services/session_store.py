"""
管理后台会话存储：按 key 读写会话数据（access_token、用户信息等）。
通过 FastAPI 依赖注入，路由中不直接访问全局状态。
"""
import secrets
from typing import Any, Optional, Protocol


class SessionStore(Protocol):
    def get(self, key: str) -> Optional[dict[str, Any]]: ...

    def set(self, key: str, blob: dict[str, Any]) -> None: ...

    def clear(self, key: str) -> None: ...


class InMemorySessionStore:
    """进程内会话存储，重启即丢失"""

    def __init__(self):
        self._sessions: dict[str, dict[str, Any]] = {}

    def get(self, key: str) -> Optional[dict[str, Any]]:
        return self._sessions.get(key)

    def set(self, key: str, blob: dict[str, Any]) -> None:
        self._sessions[key] = dict(blob)

    def clear(self, key: str) -> None:
        self._sessions.pop(key, None)


def new_session_key() -> str:
    return secrets.token_urlsafe(32)

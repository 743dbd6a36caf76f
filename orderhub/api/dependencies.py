"""
路由共用依赖；测试中通过 app.dependency_overrides 替换。
"""
from typing import Optional

import httpx
from fastapi import Request

from orderhub.services.session_store import SessionStore


def get_upstream_transport() -> Optional[httpx.AsyncBaseTransport]:
    """上游 HTTP 传输层，None 表示 httpx 默认网络传输"""
    return None


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store

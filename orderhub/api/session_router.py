"""
管理后台会话接口：保存 / 读取 / 清除当前会话。
"""
from typing import Any, Optional

from fastapi import APIRouter, Cookie, Depends, Response
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import BaseModel

from orderhub.api.dependencies import get_session_store
from orderhub.services.session_store import SessionStore, new_session_key

SESSION_COOKIE = "admin_session"

router = APIRouter(prefix="/api/auth", tags=["Auth"])


class SessionPayload(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    user: Optional[dict[str, Any]] = None


@router.post("/session")
async def create_session(
    payload: SessionPayload,
    response: Response,
    store: SessionStore = Depends(get_session_store),
):
    session = payload.model_dump(exclude_none=True)
    key = new_session_key()
    store.set(key, session)
    response.set_cookie(SESSION_COOKIE, key, httponly=True, samesite="lax")
    logger.info("🔑 管理后台会话已保存")
    return {"success": True, "session": session}


@router.get("/session")
async def read_session(
    admin_session: Optional[str] = Cookie(default=None),
    store: SessionStore = Depends(get_session_store),
):
    session = store.get(admin_session) if admin_session else None
    if session is None:
        return JSONResponse(status_code=401, content={
            "success": False,
            "message": "No active session",
            "session": None,
        })
    return {"success": True, "session": session}


@router.delete("/session")
async def clear_session(
    response: Response,
    admin_session: Optional[str] = Cookie(default=None),
    store: SessionStore = Depends(get_session_store),
):
    if admin_session:
        store.clear(admin_session)
    response.delete_cookie(SESSION_COOKIE)
    logger.info("👋 管理后台会话已清除")
    return {"success": True}

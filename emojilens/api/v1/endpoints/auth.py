import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import RedirectResponse

from emojilens.api.deps import get_code_host, get_storage
from emojilens.core.config import settings
from emojilens.schemas.user import SimpleAuthRequest, SimpleAuthResponse, User
from emojilens.services.github_service import CodeHost, CodeHostError
from emojilens.services.storage import MemStorage

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/auth/simple", response_model=SimpleAuthResponse)
def simple_auth(request: SimpleAuthRequest, store: MemStorage = Depends(get_storage)) -> SimpleAuthResponse:
    """Sign in by username alone; the user is created on first use."""
    username = request.username.strip()
    if not username:
        raise HTTPException(status_code=400, detail="Username is required")

    user = store.get_user_by_username(username)
    if user is None:
        user = store.create_user(username=username)
        logger.info(f"Created user {user.id} ({username})")
    return SimpleAuthResponse(user=user)


@router.get("/auth/github")
def github_login(code_host: CodeHost = Depends(get_code_host)) -> RedirectResponse:
    try:
        url = code_host.authorize_url()
    except CodeHostError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return RedirectResponse(url)


@router.get("/auth/github/callback")
def github_callback(
    code: Optional[str] = None,
    store: MemStorage = Depends(get_storage),
    code_host: CodeHost = Depends(get_code_host),
) -> RedirectResponse:
    if not code:
        raise HTTPException(status_code=400, detail="Missing OAuth code")

    try:
        access_token, gh_user = code_host.exchange_code_for_token(code)
    except CodeHostError as e:
        logger.error(f"GitHub OAuth exchange failed: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    user: Optional[User] = store.get_user_by_github_id(gh_user.id)
    if user is None:
        user = store.create_user(
            username=gh_user.login,
            email=gh_user.email,
            avatar=gh_user.avatar_url,
            github_id=gh_user.id,
            access_token=access_token,
        )
        logger.info(f"Created GitHub user {user.id} ({gh_user.login})")
    else:
        user = store.update_user(
            user.id,
            username=gh_user.login,
            email=gh_user.email,
            avatar=gh_user.avatar_url,
            access_token=access_token,
        )

    return RedirectResponse(f"{settings.frontend_url}?user={user.id}")

# usedbooks/api/deps.py
from fastapi import HTTPException, Request

from usedbooks.domain.context import RequestContext
from usedbooks.utils.settings import ADMIN_USER_ID

SESSION_USER_KEY = "userId"
SESSION_CHECKOUT_KEY = "justCheckedOut"


def get_optional_context(request: Request) -> RequestContext | None:
    user_id = request.session.get(SESSION_USER_KEY)
    if not user_id:
        return None
    return RequestContext(user_id=user_id, is_admin=user_id == ADMIN_USER_ID)


def get_context(request: Request) -> RequestContext:
    ctx = get_optional_context(request)
    if ctx is None:
        raise HTTPException(status_code=401, detail="Login required.")
    return ctx

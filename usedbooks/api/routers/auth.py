from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from usedbooks.api.deps import SESSION_USER_KEY
from usedbooks.data.database import get_db
from usedbooks.domain.errors import AlreadyExistsError
from usedbooks.domain.schemas import LoginIn, LoginResponse, MessageResponse, RegisterIn
from usedbooks.services.cart_service import CartService
from usedbooks.services.user_service import UserService

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=MessageResponse)
def register(payload: RegisterIn, db: Session = Depends(get_db)):
    service = UserService(db)
    try:
        service.register(payload.userid, payload.password, payload.confirm_password)
    except AlreadyExistsError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"ok": True, "message": "Registration successful. Please log in."}


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginIn, request: Request, db: Session = Depends(get_db)):
    service = UserService(db)
    try:
        user = service.authenticate(payload.userid, payload.password)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not user:
        raise HTTPException(status_code=401, detail="Invalid username or password.")

    request.session[SESSION_USER_KEY] = user.userid
    CartService(db).get_or_create(user.userid)
    return {"ok": True, "user_id": user.userid}


@router.post("/logout", response_model=MessageResponse)
def logout(request: Request):
    request.session.clear()
    return {"ok": True}

from fastapi import APIRouter, Depends, Response, HTTPException, status
from nomadmatch.schemas import LoginRequest, LoginResponse
from nomadmatch.auth import verify_password, create_session_token, get_current_user, COOKIE_NAME

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest, response: Response):
    """
    Issue a session for the requested uid.

    Single-tenant stand-in for the app's real auth provider: one shared
    password admits any uid, so whoever holds it can act as any user.
    """
    if not verify_password(request.password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid password",
        )

    token = create_session_token(request.uid)
    response.set_cookie(
        key=COOKIE_NAME,
        value=token,
        httponly=True,
        max_age=30 * 24 * 60 * 60,  # 30 days
        samesite="lax",
    )
    return LoginResponse(success=True, message="Logged in successfully")


@router.post("/logout", response_model=LoginResponse)
async def logout(response: Response):
    response.delete_cookie(COOKIE_NAME)
    return LoginResponse(success=True, message="Logged out successfully")


@router.get("/check")
async def check_auth(uid: str = Depends(get_current_user)):
    return {"authenticated": True, "uid": uid}

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, Request, status
from fastapi.responses import JSONResponse

from core.auth_service import AuthError, AuthService
from api.v1.schemas import ErrorOut, LoginIn, LoginOut, LoginResultOut, MessageOut, RegisterIn

router = APIRouter()


# ───────────────────────── helpers ──────────────────────────
def get_auth_service(request: Request) -> AuthService:
    """Service instance built at startup (see main.lifespan)."""
    return request.app.state.auth_service


def _failure(exc: AuthError, *, flagged: bool = False) -> JSONResponse:
    """Render a service error; login-style endpoints also carry `error: true`."""
    if flagged:
        body = ErrorOut(message=exc.message).model_dump()
    else:
        body = MessageOut(message=exc.message).model_dump()
    return JSONResponse(body, status_code=exc.status_code)


# ───────────────────────── register ─────────────────────────
@router.post(
    "/register",
    response_model=MessageOut,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": MessageOut}, 500: {"model": MessageOut}},
)
async def register(
    body: RegisterIn,
    svc: AuthService = Depends(get_auth_service),
) -> MessageOut | JSONResponse:
    try:
        message = await svc.register(
            email=body.email,
            password=body.password,
            confirm_password=body.confirm_password,
            fullname=body.fullname,
            height=body.height,
            weight=body.weight,
            age=body.age,
            gender=body.gender,
        )
    except AuthError as exc:
        return _failure(exc)
    return MessageOut(message=message)


# ───────────────────────── login ────────────────────────────
@router.post(
    "/login",
    response_model=LoginOut,
    status_code=status.HTTP_200_OK,
    responses={
        400: {"model": ErrorOut},
        404: {"model": ErrorOut},
        500: {"model": ErrorOut},
    },
)
async def login(
    body: LoginIn,
    svc: AuthService = Depends(get_auth_service),
) -> LoginOut | JSONResponse:
    try:
        result = await svc.login(email=body.email, password=body.password)
    except AuthError as exc:
        return _failure(exc, flagged=True)
    return LoginOut(
        message="Login successful",
        login_result=LoginResultOut(**result.model_dump()),
    )


# ───────────────────────── logout ───────────────────────────
@router.post(
    "/logout",
    response_model=MessageOut,
    status_code=status.HTTP_200_OK,
    responses={
        400: {"model": MessageOut},
        401: {"model": MessageOut},
        404: {"model": MessageOut},
        500: {"model": MessageOut},
    },
)
async def logout(
    authorization: str | None = Header(None),
    svc: AuthService = Depends(get_auth_service),
) -> MessageOut | JSONResponse:
    try:
        message = await svc.logout(authorization)
    except AuthError as exc:
        return _failure(exc)
    return MessageOut(message=message)

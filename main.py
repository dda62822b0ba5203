import logging
from contextlib import asynccontextmanager
from datetime import timedelta

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.cors import CORSMiddleware

from config import settings
from api.v1.router import api_router
from api.v1.schemas import ErrorOut, MessageOut
from core.auth_service import AuthService
from services import db
from services.auth import BcryptHasher, JwtCodec
from services.users import CredentialStore, InMemoryCredentialStore, SqlCredentialStore

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
)
_LOG = logging.getLogger(__name__)


async def _build_store() -> CredentialStore:
    if not (settings.database_url or settings.cloud_sql_instance) and settings.env_name == "local":
        _LOG.warning("no database configured – using in-memory credential store")
        return InMemoryCredentialStore()
    await db.init_models()
    return SqlCredentialStore(await db.session_factory())


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.auth_service = AuthService(
        store=await _build_store(),
        hasher=BcryptHasher(),
        codec=JwtCodec(
            settings.jwt_secret, ttl=timedelta(minutes=settings.token_ttl_minutes)
        ),
    )
    _LOG.info("Account API ready (env=%s)", settings.env_name)
    yield
    await db.dispose_engine()


app = FastAPI(title="Account API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.exception_handler(RequestValidationError)
async def invalid_payload(request: Request, exc: RequestValidationError) -> JSONResponse:
    # locations only; the raw input may hold a password
    fields = [".".join(str(p) for p in err["loc"]) for err in exc.errors()]
    _LOG.info("rejected payload on %s: %s", request.url.path, fields)
    message = "Invalid request payload"
    # /login failures always carry the `error` flag
    if request.url.path == "/login":
        body = ErrorOut(message=message).model_dump()
    else:
        body = MessageOut(message=message).model_dump()
    return JSONResponse(body, status_code=status.HTTP_400_BAD_REQUEST)


@app.get("/health", tags=["meta"])
def health() -> dict[str, str]:
    return {"status": "ok", "env": settings.env_name}


if __name__ == "__main__":
    uvicorn.run("main:app", host=settings.host, port=settings.port)

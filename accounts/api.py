"""FastAPI application exposing the account endpoints."""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from fastapi import Depends, FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, StrictBool

from .config import Settings, load_seed_accounts, load_settings
from .errors import AccountError
from .lifecycle import AccountService
from .models import Actor
from .passwords import PasswordHasher
from .security import BearerAuth, require_admin
from .store import UserStore
from .tokens import TokenService

logger = logging.getLogger("accounts.api")


class RegisterRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    email: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LoginRequest(BaseModel):
    email: str
    password: str


class LoginResponse(BaseModel):
    token: str


class UpdateRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    email: Optional[str] = Field(default=None, min_length=1)
    name: Optional[str] = Field(default=None, min_length=1)
    password: Optional[str] = Field(default=None, min_length=1)
    isAdm: Optional[StrictBool] = None


async def _account_error_handler(request: Request, exc: AccountError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


def create_app(
    *,
    store: UserStore | None = None,
    settings: Settings | None = None,
    hasher: PasswordHasher | None = None,
    tokens: TokenService | None = None,
) -> FastAPI:
    """Instantiate the account API around an injected user store."""

    if settings is None:
        settings = load_settings()
    if store is None:
        store = UserStore()
    if hasher is None:
        hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    if tokens is None:
        tokens = TokenService(settings.secret_key, ttl=settings.token_ttl)

    service = AccountService(store, hasher, tokens)
    if settings.seed_path is not None:
        seeded = service.seed(load_seed_accounts(settings.seed_path))
        logger.info("Seeded %d account(s) from %s", len(seeded), settings.seed_path)

    auth = BearerAuth(tokens)

    app = FastAPI(
        title="Account Service",
        description="User registration, login and profile management",
        version="1.0.0",
    )
    app.state.store = store
    app.state.service = service
    app.add_exception_handler(AccountError, _account_error_handler)

    def get_service() -> AccountService:
        return service

    async def current_actor(request: Request) -> Actor:
        return await auth(request)

    def admin_actor(actor: Actor = Depends(current_actor)) -> Actor:
        return require_admin(actor)

    @app.get("/health")
    async def healthcheck() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/users", status_code=status.HTTP_201_CREATED)
    async def register_user(
        payload: RegisterRequest,
        accounts: AccountService = Depends(get_service),
    ) -> Dict[str, object]:
        return await accounts.register(payload.model_dump())

    @app.post("/login", response_model=LoginResponse)
    async def login(
        payload: LoginRequest,
        accounts: AccountService = Depends(get_service),
    ) -> Dict[str, str]:
        return await accounts.login(payload.email, payload.password)

    @app.get("/users")
    async def list_users(
        name: Optional[str] = None,
        actor: Actor = Depends(admin_actor),
        accounts: AccountService = Depends(get_service),
    ) -> List[Dict[str, object]]:
        return accounts.list_users(name)

    @app.get("/users/profile")
    async def read_profile(
        actor: Actor = Depends(current_actor),
        accounts: AccountService = Depends(get_service),
    ) -> Dict[str, object]:
        return accounts.get_profile(actor.id)

    @app.patch("/users/{user_id}")
    async def update_user(
        user_id: str,
        payload: UpdateRequest,
        actor: Actor = Depends(current_actor),
        accounts: AccountService = Depends(get_service),
    ) -> Dict[str, object]:
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        changes.update(payload.model_extra or {})
        return await accounts.update_user(user_id, changes, actor)

    @app.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_user(
        user_id: str,
        actor: Actor = Depends(current_actor),
        accounts: AccountService = Depends(get_service),
    ) -> Response:
        accounts.delete_user(user_id, actor)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return app


__all__ = ["create_app"]

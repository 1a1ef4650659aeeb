"""Session state: the single signed-in identity and the login/register flows."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from food_delivery.errors import (
    LOGIN_MESSAGES,
    REGISTER_MESSAGES,
    FoodDeliveryError,
    LoginError,
    RegisterError,
    RemoteRejected,
)
from food_delivery.gateway import RemoteGateway
from food_delivery.models import Identity, Role

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginResult:
    """Outcome of a login attempt. Exactly one of identity/error is set."""

    identity: Identity | None = None
    error: LoginError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> str:
        if self.error is not None:
            return LOGIN_MESSAGES[self.error]
        if self.identity is None:
            return "Not signed in."
        return f"Welcome, {self.identity.name}."


@dataclass(frozen=True)
class RegisterResult:
    """Outcome of a registration attempt. Exactly one of identity/error is set."""

    identity: Identity | None = None
    error: RegisterError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> str:
        if self.error is not None:
            return REGISTER_MESSAGES[self.error]
        if self.identity is None:
            return "Not registered."
        return f"Registered {self.identity.name}. Your account id is {self.identity.id}; use it to log in."


class SessionManager:
    """Owns the current identity. Failures come back as result values, never raised."""

    def __init__(self, gateway: RemoteGateway) -> None:
        self.gateway = gateway
        self.current: Identity | None = None

    @property
    def role(self) -> Role | None:
        return self.current.role if self.current is not None else None

    async def login(self, role: Role, raw_id: str) -> LoginResult:
        text = (raw_id or "").strip()
        if not text:
            return LoginResult(error=LoginError.EMPTY_INPUT)

        try:
            user_id = int(text)
        except ValueError:
            return LoginResult(error=LoginError.INVALID_CREDENTIALS)
        if user_id <= 0:
            return LoginResult(error=LoginError.INVALID_CREDENTIALS)

        try:
            identity = await self.gateway.login(user_id, role)
        except RemoteRejected as exc:
            logger.info("login rejected id=%s role=%s status=%s", user_id, role.value, exc.status_code)
            return LoginResult(error=LoginError.INVALID_CREDENTIALS)
        except FoodDeliveryError as exc:
            logger.warning("login unreachable id=%s role=%s error=%s", user_id, role.value, exc)
            return LoginResult(error=LoginError.UNREACHABLE)

        # Accounts are keyed by id and role together.
        if identity.id != user_id or identity.role != role:
            logger.warning("login reply mismatch requested=%s/%s got=%s/%s", user_id, role.value, identity.id, identity.role.value)
            return LoginResult(error=LoginError.INVALID_CREDENTIALS)

        self.current = identity
        logger.info("login ok id=%s role=%s", identity.id, identity.role.value)
        return LoginResult(identity=identity)

    async def register(self, role: Role, raw_name: str) -> RegisterResult:
        name = (raw_name or "").strip()
        if not name:
            return RegisterResult(error=RegisterError.EMPTY_INPUT)

        try:
            identity = await self.gateway.register(name, role)
        except FoodDeliveryError as exc:
            logger.warning("register failed name=%r role=%s error=%s", name, role.value, exc)
            return RegisterResult(error=RegisterError.REMOTE_FAILURE)

        logger.info("registered id=%s role=%s", identity.id, identity.role.value)
        return RegisterResult(identity=identity)

    def logout(self) -> None:
        if self.current is not None:
            logger.info("logout id=%s", self.current.id)
        self.current = None

"""Actor identity passed into every mutating operation."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict


class UserActor(BaseModel):
    """A change made on behalf of an authenticated user."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["user"] = "user"
    user_id: str

    @property
    def identity(self) -> str:
        return self.user_id


class SystemActor(BaseModel):
    """A change made by background or console execution."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["system"] = "system"

    @property
    def identity(self) -> str:
        return "system"


Actor = UserActor | SystemActor

SYSTEM = SystemActor()


def user(user_id: str) -> UserActor:
    return UserActor(user_id=user_id)

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CredentialsDTO(BaseModel):
    """Body of ``POST /register`` and ``POST /login``.

    Only presence and type are checked; usernames are matched exactly
    (case-sensitive, no trimming) and there are no password-strength rules.
    """

    model_config = ConfigDict(extra="ignore")

    username: str = Field(min_length=1, max_length=128)
    password: str = Field(min_length=1, max_length=256)


class RegisterRequestDTO(CredentialsDTO):
    pass


class LoginRequestDTO(CredentialsDTO):
    pass


class TokenResponseDTO(BaseModel):
    token: str

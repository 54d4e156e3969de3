from pydantic import BaseModel, Field, field_validator

from notekeeper.utils.principal import is_valid_user_id


class _Credentials(BaseModel):
    user_id: str = Field(min_length=3, max_length=32)
    password: str = Field(min_length=8, max_length=128)

    @field_validator("user_id")
    @classmethod
    def user_id_fits_identity(cls, v: str) -> str:
        # owner identities are 32 bytes, not 32 characters
        if not is_valid_user_id(v):
            raise ValueError("user_id must be at most 32 UTF-8 bytes")
        return v


class RegisterRequest(_Credentials):
    pass


class LoginRequest(_Credentials):
    pass


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"

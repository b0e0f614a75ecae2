from pydantic import EmailStr, Field, model_validator

from filevault.schemas.base import CamelModel, CamelORMModel


class UserCreate(CamelModel):
    username: str = Field(min_length=3, max_length=50)
    email: EmailStr = Field(max_length=100)
    password: str = Field(min_length=6, max_length=120)


class SignInRequest(CamelModel):
    username: str | None = None
    email: str | None = None
    password: str = Field(min_length=1)

    @model_validator(mode="after")
    def _principal_present(self):
        if not (self.username or self.email):
            raise ValueError("username or email is required")
        return self

    @property
    def principal(self) -> str:
        if self.username and self.username.strip():
            return self.username
        return self.email or ""


class UserRead(CamelORMModel):
    id: str
    username: str
    email: str


class SignUpResponse(CamelORMModel):
    message: str
    user_id: str


class TokenResponse(CamelORMModel):
    token: str
    type: str = "Bearer"
    user: UserRead

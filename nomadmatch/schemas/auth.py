from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    uid: str = Field(min_length=1, max_length=128)
    password: str


class LoginResponse(BaseModel):
    success: bool
    message: str

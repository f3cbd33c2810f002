from pydantic import BaseModel


class LoginRequest(BaseModel):
    email: str
    password: str


class TokenResponse(BaseModel):
    success: bool = True
    token: str


class AdminIdentity(BaseModel):
    id: str
    email: str = ""

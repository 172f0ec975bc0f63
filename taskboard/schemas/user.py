from typing import Optional

from pydantic import BaseModel


class UserCreate(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
    phone: Optional[str] = None


class UserLogin(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserOut(BaseModel):
    id: int
    email: str
    phone: Optional[str] = ""
    # Never expose the password digest or the token here


class UserSummary(BaseModel):
    id: int
    email: str


class LoginResponse(BaseModel):
    token: str
    user: UserSummary

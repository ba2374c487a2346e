from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator


class UserCreate(BaseModel):
    email: EmailStr
    password: str

    @field_validator("password")
    @classmethod
    def password_max_bytes(cls, v: str) -> str:
        """Ensure password does not exceed bcrypt's 72-byte limit when UTF-8 encoded.

        Raise a validation error so API returns a 422 with a clear message.
        """
        if not v:
            raise ValueError("password cannot be empty")
        if len(v.encode("utf-8")) > 72:
            raise ValueError("password too long: must be at most 72 bytes when UTF-8 encoded")
        return v


class UserOut(BaseModel):
    id: str
    email: EmailStr

    model_config = ConfigDict(from_attributes=True)


class SessionOut(BaseModel):
    token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: UserOut

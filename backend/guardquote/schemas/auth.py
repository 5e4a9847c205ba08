from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator

class Token(BaseModel):
    access_token: str
    token_type: str

class UserRegister(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    first_name: str = Field(..., min_length=1, max_length=120)
    last_name: str = Field(..., min_length=1, max_length=120)
    user_type: Literal["individual", "business"] = "individual"
    company_name: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=32)

    @model_validator(mode="after")
    def _company_for_business(self) -> "UserRegister":
        # company_name is kept only for business accounts
        if self.user_type == "business":
            if not (self.company_name or "").strip():
                raise ValueError("company_name is required for business accounts")
            self.company_name = self.company_name.strip()
        else:
            self.company_name = None
        return self

class UserOut(BaseModel):
    id: int
    email: EmailStr
    first_name: str
    last_name: str
    user_type: str
    company_name: Optional[str] = None
    phone: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

class UserLogin(BaseModel):
    email: EmailStr
    password: str

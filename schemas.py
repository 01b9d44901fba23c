from pydantic import BaseModel, ConfigDict, Field, StrictBool
from datetime import datetime
from typing import Optional, Union


# Request bodies keep every field optional; the services decide what is
# missing so callers get one consistent error message.
class UserCreate(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None


class UserLogin(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class AuthResult(BaseModel):
    success: bool = True
    name: str
    token: str


class Success(BaseModel):
    success: bool = True


class Me(BaseModel):
    loggedIn: bool
    name: Optional[str] = None


class ExpenseCreate(BaseModel):
    description: Optional[str] = None
    # StrictBool keeps JSON true/false from being coerced to 1.0/0.0
    amount: Optional[Union[StrictBool, float]] = None
    category: Optional[str] = None


class ExpenseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    description: str
    amount: float
    category: str
    date: str
    created_at: datetime = Field(alias="createdAt")


class Stats(BaseModel):
    total: float
    count: int
    byCategory: dict[str, float]
    last7Days: dict[str, float]
    byMonth: dict[str, float]

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

# --- Incoming Request Models ---
# Fields are optional strings on purpose: presence and shape are checked by
# app.services.validation so the first failing field produces the message.

class BookingIn(BaseModel):
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    message: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None

class BookingUpdate(BaseModel):
    action: Optional[str] = None
    newDate: Optional[str] = None
    newTime: Optional[str] = None

class LoginRequest(BaseModel):
    name: Optional[str] = None
    password: Optional[str] = None

class UserCreate(BaseModel):
    name: Optional[str] = None
    password: Optional[str] = None

class UserUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[int] = Field(default=None, alias="_id")
    name: Optional[str] = None
    password: Optional[str] = None

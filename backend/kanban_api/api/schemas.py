"""Request and response bodies. JSON field names are camelCase."""

from datetime import datetime
from typing import List
from pydantic import BaseModel, ConfigDict, Field


class Credentials(BaseModel):
    # Missing fields become "" and are rejected by the auth service
    email: str = ""
    password: str = ""


class BoardWrite(BaseModel):
    title: str = ""


class UserOut(BaseModel):
    # Built from the User entity; password_hash is simply not a field here
    id: str
    email: str
    created_at: datetime = Field(alias="createdAt")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class BoardOut(BaseModel):
    id: str
    title: str
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class AuthResult(BaseModel):
    user: UserOut
    token: str


class AuthEnvelope(BaseModel):
    data: AuthResult


class UserEnvelope(BaseModel):
    data: UserOut


class BoardEnvelope(BaseModel):
    data: BoardOut


class BoardListEnvelope(BaseModel):
    data: List[BoardOut]

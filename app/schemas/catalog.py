# app/schemas/catalog.py
import uuid
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class CategoryCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=100)
    description: str | None = Field(default=None, max_length=500)
    image_url: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class CategoryUpdate(SQLModel):
    """
    Partial update payload. All fields are optional.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    image_url: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class CategoryRead(SQLModel):
    id: uuid.UUID
    name: str
    description: str | None
    image_url: str | None
    is_active: bool
    created_at: datetime


class BrandCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=100)
    description: str | None = Field(default=None, max_length=500)
    country: str | None = Field(default=None, max_length=100)
    logo_url: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class BrandUpdate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    country: str | None = Field(default=None, max_length=100)
    logo_url: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class BrandRead(SQLModel):
    id: uuid.UUID
    name: str
    description: str | None
    country: str | None
    logo_url: str | None
    is_active: bool
    created_at: datetime

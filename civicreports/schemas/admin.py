"""Admin catalogue schemas: users, categories, zones, settings."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

ROLE_PATTERN = "^(admin|supervisor|mobile|viewer)$"
COLOR_PATTERN = "^#[0-9A-Fa-f]{6}$"


def _check_email(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip().lower()
    if "@" not in v or v.startswith("@") or v.endswith("@"):
        raise ValueError("Invalid email address")
    return v


class User(BaseModel):
    id: str
    name: str
    email: str
    role: str
    active: bool = True
    mobile_user_type: str | None = None
    created_at: datetime
    last_login: datetime | None = None


class UserCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    email: str = Field(min_length=3, max_length=255)
    role: str = Field(default="viewer", pattern=ROLE_PATTERN)
    active: bool = True
    mobile_user_type: str | None = Field(default=None, pattern="^(citizen|technician)$")
    password: str | None = Field(default=None, min_length=6, description="Accepted, never stored")

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str | None) -> str | None:
        return _check_email(v)


class UserUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=120)
    email: str | None = None
    role: str | None = Field(default=None, pattern=ROLE_PATTERN)
    active: bool | None = None
    mobile_user_type: str | None = Field(default=None, pattern="^(citizen|technician)$")
    password: str | None = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str | None) -> str | None:
        return _check_email(v)


class UserStats(BaseModel):
    total: int
    active: int
    inactive: int
    admins: int
    supervisors: int
    mobile: int


class Category(BaseModel):
    id: str
    name: str
    description: str = ""
    color: str = "#888888"
    icon: str = "tag"
    active: bool = True
    created_at: datetime


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str = ""
    color: str = Field(default="#888888", pattern=COLOR_PATTERN)
    icon: str = "tag"
    active: bool = True


class CategoryUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None
    color: str | None = Field(default=None, pattern=COLOR_PATTERN)
    icon: str | None = None
    active: bool | None = None


class Zone(BaseModel):
    id: str
    name: str
    description: str = ""
    active: bool = True
    created_at: datetime


class ZoneCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str = ""
    active: bool = True


class ZoneUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None
    active: bool | None = None


class SystemSetting(BaseModel):
    id: str
    key: str
    value: str
    description: str = ""
    group: str


class SettingUpdate(BaseModel):
    value: str

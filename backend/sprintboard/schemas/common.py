"""Shared schema pieces."""
from pydantic import BaseModel


class TimeValueSchema(BaseModel):
    """Work time in 8-hour days, hours and minutes."""

    days: int = 0
    hours: int = 0
    minutes: int = 0


class UserRef(BaseModel):
    id: int
    name: str
    last_name: str

    class Config:
        from_attributes = True


class SprintRef(BaseModel):
    id: int
    indicator: int

    class Config:
        from_attributes = True

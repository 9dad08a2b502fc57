from datetime import datetime

from pydantic import BaseModel, Field


class FantasyClubCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    roster: list[int] = Field(default_factory=list)


class FantasyClubResponse(BaseModel):
    id: int
    name: str
    owner_id: int
    roster: list[int] = []
    fantasy_points: int = 0
    created_at: datetime | None = None

    class Config:
        from_attributes = True

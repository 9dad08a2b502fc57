from pydantic import BaseModel


class ClubInPlayer(BaseModel):
    id: int
    name: str | None = None
    short_code: str | None = None
    logo: str | None = None

    class Config:
        from_attributes = True


class PlayerResponse(BaseModel):
    id: int
    name: str | None = None
    display_name: str | None = None
    common_name: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    photo: str | None = None
    position_id: int | None = None
    position_name: str | None = None
    detailed_position_id: int | None = None
    detailed_position_name: str | None = None
    country_name: str | None = None
    country_flag: str | None = None
    country_iso3: str | None = None
    statistics: dict | None = None
    club: ClubInPlayer | None = None

    class Config:
        from_attributes = True


class PlayerListResponse(BaseModel):
    items: list[PlayerResponse]
    total: int

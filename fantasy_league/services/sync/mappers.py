"""
Raw API record → column values, one mapper per entity type.

Mappers are pure: everything they need beyond the raw record (current season
ids, the reference "now", type labels, stored club ids) is passed in.
"""
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from fantasy_league.utils.timestamps import as_utc, parse_date, parse_datetime

RawItem = Mapping[str, Any]


def _unique_ids(items: Iterable[Any] | None, key: str) -> list[int]:
    """Collect ``item[key]`` values in first-seen order, dropping blanks and repeats."""
    ids: list[int] = []
    seen: set[int] = set()
    for item in items or []:
        if not isinstance(item, Mapping):
            continue
        value = item.get(key)
        if value is None or value in seen:
            continue
        seen.add(value)
        ids.append(value)
    return ids


def map_league(league: RawItem) -> dict[str, Any]:
    # Include name is camelCase in requests but the payload key is lowercase
    current = league.get("currentseason") or league.get("currentSeason") or {}
    return {
        "country_id": league.get("country_id"),
        "name": league.get("name"),
        "short_code": league.get("short_code"),
        "logo": league.get("image_path"),
        "season_id": current.get("id"),
        "season_name": current.get("name"),
        "season_start": parse_date(current.get("starting_at") or current.get("start_date")),
        "season_end": parse_date(current.get("ending_at") or current.get("end_date")),
    }


def map_season(season: RawItem) -> dict[str, Any]:
    return {
        "name": season.get("name"),
        "start_date": parse_date(season.get("starting_at")),
        "end_date": parse_date(season.get("ending_at")),
        "league_id": season.get("league_id"),
        "club_ids": _unique_ids(season.get("teams"), "id"),
        "fixture_ids": _unique_ids(season.get("fixtures"), "id"),
    }


def map_club(club: RawItem, league_by_club: Mapping[int, int] | None = None) -> dict[str, Any]:
    """
    Map a team record.

    The team endpoint carries no league; ``league_by_club`` (built from stored
    seasons) supplies it when known.
    """
    return {
        "country_id": club.get("country_id"),
        "name": club.get("name"),
        "short_code": club.get("short_code"),
        "logo": club.get("image_path"),
        "league_id": (league_by_club or {}).get(club["id"]),
        "roster": _unique_ids(club.get("players"), "player_id"),
    }


def resolve_home_away(participants: Iterable[Any] | None) -> tuple[int | None, int | None]:
    """Return (home_team_id, away_team_id) by each participant's ``meta.location``."""
    home_id = away_id = None
    for participant in participants or []:
        if not isinstance(participant, Mapping):
            continue
        location = (participant.get("meta") or {}).get("location")
        if location == "home" and home_id is None:
            home_id = participant.get("id")
        elif location == "away" and away_id is None:
            away_id = participant.get("id")
    return home_id, away_id


def map_fixture(fixture: RawItem) -> dict[str, Any]:
    home_team_id, away_team_id = resolve_home_away(fixture.get("participants"))
    return {
        "name": fixture.get("name"),
        "league_id": fixture.get("league_id"),
        "season_id": fixture.get("season_id"),
        "stage_id": fixture.get("stage_id"),
        "round_id": fixture.get("round_id"),
        "start_date": parse_datetime(fixture.get("starting_at")),
        "home_team_id": home_team_id,
        "away_team_id": away_team_id,
        "lineups": _unique_ids(fixture.get("lineups"), "player_id"),
    }


def map_type(type_record: RawItem) -> dict[str, Any]:
    return {
        "name": type_record.get("name"),
        "code": type_record.get("code"),
        "developer_name": type_record.get("developer_name"),
        "model_type": type_record.get("model_type"),
        "stat_group": type_record.get("stat_group"),
    }


def map_country(country: RawItem) -> dict[str, Any]:
    return {
        "name": country.get("name"),
        "fifa_name": country.get("fifa_name"),
        "iso3": country.get("iso3"),
        "flag": country.get("image_path"),
    }


# ---------------------------------------------------------------------------
# Players
# ---------------------------------------------------------------------------


@dataclass
class PlayerMappingContext:
    """
    Inputs the player mapper needs beyond the raw record.

    Attributes:
        current_season_ids: Seasons whose statistics count as "current"
        now: Reference instant for resolving the current club
        type_names: Type id → human-readable name (positions, statistics)
        club_ids: Stored club ids; a resolved club outside this set is dropped.
            None disables the check.
    """
    current_season_ids: frozenset[int]
    now: datetime
    type_names: Mapping[int, str] = field(default_factory=dict)
    club_ids: frozenset[int] | None = None


def resolve_current_team_id(teams: Iterable[Any] | None, now: datetime) -> int | None:
    """
    Pick the team whose [start, end) interval contains ``now``.

    A missing end date means the spell is ongoing. When several spells match,
    the one with the latest start wins.
    """
    now = as_utc(now)
    best_team_id = None
    best_start: datetime | None = None

    for entry in teams or []:
        if not isinstance(entry, Mapping):
            continue
        team_id = entry.get("team_id", entry.get("team"))
        start = parse_datetime(entry.get("start"))
        if team_id is None or start is None or start > now:
            continue
        end = parse_datetime(entry.get("end"))
        if end is not None and now >= end:
            continue
        if best_start is None or start > best_start:
            best_team_id, best_start = team_id, start

    return best_team_id


def select_current_season_statistics(
    statistics: Any,
    current_season_ids: Iterable[int],
) -> dict[str, Any] | None:
    """First statistics entry, in API order, whose season is a current season."""
    if isinstance(statistics, Mapping):
        statistics = [statistics]
    if not isinstance(statistics, list):
        return None
    season_ids = set(current_season_ids)
    for entry in statistics:
        if isinstance(entry, Mapping) and entry.get("season_id") in season_ids:
            return dict(entry)
    return None


def enrich_statistics_details(
    statistics: dict[str, Any],
    type_names: Mapping[int, str],
) -> dict[str, Any]:
    """
    Normalize ``details`` to a list and label each detail with its type name.

    Details whose type is not in the lookup table are flagged
    ``type_missing: true`` instead.
    """
    details = statistics.get("details")
    if details is None:
        details = []
    elif isinstance(details, Mapping):
        details = [details]

    enriched = []
    for detail in details:
        if not isinstance(detail, Mapping):
            continue
        detail = dict(detail)
        type_name = type_names.get(detail.get("type_id"))
        if type_name is not None:
            detail["type_name"] = type_name
        else:
            detail["type_missing"] = True
        enriched.append(detail)

    return {**statistics, "details": enriched}


def map_player(player: RawItem, context: PlayerMappingContext) -> dict[str, Any]:
    country = player.get("country") or {}

    statistics = select_current_season_statistics(
        player.get("statistics"), context.current_season_ids
    )
    if statistics is not None:
        statistics = enrich_statistics_details(statistics, context.type_names)

    club_id = resolve_current_team_id(player.get("teams"), context.now)
    if club_id is not None and context.club_ids is not None and club_id not in context.club_ids:
        club_id = None

    position_id = player.get("position_id")
    detailed_position_id = player.get("detailed_position_id")

    return {
        "position_id": position_id,
        "position_name": context.type_names.get(position_id),
        "detailed_position_id": detailed_position_id,
        "detailed_position_name": context.type_names.get(detailed_position_id),
        "type_id": player.get("type_id"),
        "first_name": player.get("firstname"),
        "last_name": player.get("lastname"),
        "common_name": player.get("common_name"),
        "name": player.get("name"),
        "display_name": player.get("display_name"),
        "photo": player.get("image_path"),
        "country_name": country.get("name"),
        "country_flag": country.get("image_path"),
        "country_fifa_name": country.get("fifa_name"),
        "country_iso3": country.get("iso3"),
        "statistics": statistics,
        "club_id": club_id,
    }

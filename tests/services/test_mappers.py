from datetime import date, datetime, timezone

from fantasy_league.services.sync.mappers import (
    PlayerMappingContext,
    enrich_statistics_details,
    map_club,
    map_fixture,
    map_league,
    map_player,
    map_season,
    resolve_current_team_id,
    resolve_home_away,
    select_current_season_statistics,
)

NOW = datetime(2022, 6, 1, tzinfo=timezone.utc)


def _player(**overrides) -> dict:
    player = {
        "id": 154421,
        "position_id": 27,
        "detailed_position_id": 151,
        "type_id": 27,
        "firstname": "Erling",
        "lastname": "Haaland",
        "common_name": "E. Haaland",
        "name": "Erling Haaland",
        "display_name": "Erling Haaland",
        "image_path": "https://cdn.test/players/154421.png",
        "country": {"name": "Norway", "image_path": "https://cdn.test/flags/no.png", "fifa_name": "NOR", "iso3": "NOR"},
        "teams": [],
        "statistics": [],
    }
    player.update(overrides)
    return player


class TestClubResolution:
    def test_open_ended_most_recent_entry_wins(self):
        teams = [
            {"team_id": 10, "start": "2020-01-01", "end": "2021-01-01"},
            {"team_id": 20, "start": "2021-01-01", "end": None},
        ]
        assert resolve_current_team_id(teams, NOW) == 20

    def test_team_key_alias(self):
        teams = [{"team": 10, "start": "2020-01-01", "end": None}]
        assert resolve_current_team_id(teams, NOW) == 10

    def test_end_is_exclusive(self):
        teams = [{"team_id": 10, "start": "2020-01-01", "end": "2022-06-01"}]
        assert resolve_current_team_id(teams, NOW) is None

    def test_future_spell_does_not_match(self):
        teams = [{"team_id": 30, "start": "2023-07-01", "end": None}]
        assert resolve_current_team_id(teams, NOW) is None

    def test_overlapping_spells_prefer_latest_start(self):
        # National team spell alongside a club spell
        teams = [
            {"team_id": 18710, "start": "2019-09-05", "end": None},
            {"team_id": 9, "start": "2022-07-01 00:00:00", "end": None},
            {"team_id": 68, "start": "2020-01-01", "end": "2022-07-01"},
        ]
        assert resolve_current_team_id(teams, NOW) == 68


class TestFixtureMapping:
    def test_home_away_resolved_from_location(self):
        participants = [{"id": 5, "meta": {"location": "away"}}, {"id": 9, "meta": {"location": "home"}}]
        assert resolve_home_away(participants) == (9, 5)

    def test_map_fixture(self):
        fixture = {
            "id": 19134454,
            "name": "Manchester City vs Chelsea",
            "league_id": 8,
            "season_id": 23614,
            "stage_id": 77471288,
            "round_id": 339235,
            "starting_at": "2024-08-18 15:30:00",
            "participants": [
                {"id": 5, "meta": {"location": "away"}},
                {"id": 9, "meta": {"location": "home"}},
            ],
            "lineups": [{"player_id": 154421}, {"player_id": 96611}, {"player_id": 154421}],
        }

        mapped = map_fixture(fixture)

        assert mapped["home_team_id"] == 9
        assert mapped["away_team_id"] == 5
        assert mapped["lineups"] == [154421, 96611]
        assert mapped["start_date"] == datetime(2024, 8, 18, 15, 30, tzinfo=timezone.utc)

    def test_missing_participants(self):
        mapped = map_fixture({"id": 1})
        assert mapped["home_team_id"] is None
        assert mapped["away_team_id"] is None
        assert mapped["lineups"] == []


class TestReferenceMapping:
    def test_map_league_current_season_snapshot(self):
        league = {
            "id": 8,
            "country_id": 462,
            "name": "Premier League",
            "short_code": "UK PL",
            "image_path": "https://cdn.test/leagues/8.png",
            "currentseason": {"id": 23614, "name": "2024/2025", "starting_at": "2024-08-16", "ending_at": "2025-05-25"},
        }

        mapped = map_league(league)

        assert mapped["season_id"] == 23614
        assert mapped["season_start"] == date(2024, 8, 16)
        assert mapped["season_end"] == date(2025, 5, 25)
        assert mapped["logo"] == "https://cdn.test/leagues/8.png"

    def test_map_league_without_current_season(self):
        mapped = map_league({"id": 8, "name": "Premier League"})
        assert mapped["season_id"] is None
        assert mapped["season_start"] is None

    def test_map_season_derived_arrays(self):
        season = {
            "id": 23614,
            "name": "2024/2025",
            "league_id": 8,
            "starting_at": "2024-08-16",
            "ending_at": "2025-05-25",
            "teams": [{"id": 1}, {"id": 9}],
            "fixtures": [{"id": 100}, {"id": 101}],
        }

        mapped = map_season(season)

        assert mapped["club_ids"] == [1, 9]
        assert mapped["fixture_ids"] == [100, 101]
        assert mapped["start_date"] == date(2024, 8, 16)

    def test_map_club_roster_and_league(self):
        club = {"id": 9, "name": "Manchester City", "players": [{"player_id": 154421}, {"player_id": 96611}]}

        mapped = map_club(club, {9: 8})

        assert mapped["roster"] == [154421, 96611]
        assert mapped["league_id"] == 8
        assert map_club(club)["league_id"] is None


class TestPlayerMapping:
    def test_select_current_season_statistics_strict_membership(self):
        statistics = [
            {"season_id": 19734, "details": []},
            {"season_id": 23614, "team_id": 9, "details": []},
            {"season_id": 23614, "team_id": 18710, "details": []},
        ]
        selected = select_current_season_statistics(statistics, {23614})
        assert selected["team_id"] == 9
        assert select_current_season_statistics(statistics, {1}) is None
        assert select_current_season_statistics(None, {23614}) is None

    def test_details_wrapped_and_labelled(self):
        enriched = enrich_statistics_details(
            {"season_id": 23614, "details": {"type_id": 52, "value": {"total": 27}}},
            {52: "Goals"},
        )
        assert enriched["details"] == [{"type_id": 52, "value": {"total": 27}, "type_name": "Goals"}]

    def test_unknown_detail_type_is_flagged(self):
        enriched = enrich_statistics_details({"details": [{"type_id": 999}]}, {})
        assert enriched["details"] == [{"type_id": 999, "type_missing": True}]

    def test_map_player(self):
        player = _player(
            teams=[
                {"team_id": 10, "start": "2020-01-01", "end": "2021-01-01"},
                {"team_id": 20, "start": "2021-01-01", "end": None},
            ],
            statistics=[{"season_id": 23614, "details": [{"type_id": 52, "value": {"total": 27}}]}],
        )
        context = PlayerMappingContext(
            current_season_ids=frozenset({23614}),
            now=NOW,
            type_names={27: "Attacker", 52: "Goals"},
        )

        mapped = map_player(player, context)

        assert mapped["club_id"] == 20
        assert mapped["position_name"] == "Attacker"
        assert mapped["detailed_position_name"] is None
        assert mapped["first_name"] == "Erling"
        assert mapped["country_iso3"] == "NOR"
        assert mapped["statistics"]["details"][0]["type_name"] == "Goals"

    def test_club_outside_stored_clubs_is_dropped(self):
        player = _player(teams=[{"team_id": 20, "start": "2021-01-01", "end": None}])
        context = PlayerMappingContext(frozenset(), NOW, club_ids=frozenset({9}))

        assert map_player(player, context)["club_id"] is None

    def test_player_without_country(self):
        mapped = map_player(_player(country=None), PlayerMappingContext(frozenset(), NOW))
        assert mapped["country_name"] is None
        assert mapped["statistics"] is None

    def test_naive_reference_time_is_treated_as_utc(self):
        teams = [{"team_id": 20, "start": "2021-01-01", "end": None}]
        assert resolve_current_team_id(teams, datetime(2022, 6, 1)) == 20

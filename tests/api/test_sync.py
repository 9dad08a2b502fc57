import pytest
from httpx import AsyncClient
from unittest.mock import AsyncMock, patch, MagicMock

from fantasy_league.models import EntityType
from fantasy_league.services.sync import OutcomeStatus, SyncOutcome


@pytest.mark.asyncio
class TestSyncAPI:
    """Tests for /api/v1/sync endpoints."""

    async def test_full_sync_success(self, client: AsyncClient):
        with patch('fantasy_league.api.sync.SyncOrchestrator') as MockOrchestrator:
            mock_instance = MagicMock()
            mock_instance.run_full = AsyncMock(return_value={
                "leagues": {"status": "synced", "fetched": 1, "saved": 1, "failed": 0},
                "seasons": {"status": "skipped_fresh"},
            })
            MockOrchestrator.return_value = mock_instance

            response = await client.post("/api/v1/sync/full?force=true")
            assert response.status_code == 200
            data = response.json()
            assert data["status"] == "success"
            assert data["details"]["leagues"]["saved"] == 1
            mock_instance.run_full.assert_awaited_once_with(force=True)

    async def test_full_sync_partial(self, client: AsyncClient):
        with patch('fantasy_league.api.sync.SyncOrchestrator') as MockOrchestrator:
            mock_instance = MagicMock()
            mock_instance.run_full = AsyncMock(return_value={
                "leagues": {"status": "synced"},
                "types": {"status": "failed", "error": "HTTP 500"},
            })
            MockOrchestrator.return_value = mock_instance

            response = await client.post("/api/v1/sync/full")
            assert response.json()["status"] == "partial"

    async def test_full_sync_error(self, client: AsyncClient):
        with patch('fantasy_league.api.sync.SyncOrchestrator') as MockOrchestrator:
            mock_instance = MagicMock()
            mock_instance.run_full = AsyncMock(side_effect=Exception("Database down"))
            MockOrchestrator.return_value = mock_instance

            response = await client.post("/api/v1/sync/full")
            assert response.status_code == 200
            data = response.json()
            assert data["status"] == "failed"
            assert "Database down" in data["message"]

    async def test_sync_single_entity_type(self, client: AsyncClient):
        with patch('fantasy_league.api.sync.SyncOrchestrator') as MockOrchestrator:
            mock_instance = MagicMock()
            mock_instance.sync_entity = AsyncMock(
                return_value=SyncOutcome(EntityType.CLUBS, OutcomeStatus.SKIPPED_NO_IDS)
            )
            MockOrchestrator.return_value = mock_instance

            response = await client.post("/api/v1/sync/clubs")
            assert response.status_code == 200
            data = response.json()
            assert data["status"] == "success"
            assert data["details"] == {"status": "skipped_no_ids"}
            mock_instance.sync_entity.assert_awaited_once_with(EntityType.CLUBS, force=False)

    async def test_sync_unknown_entity_type(self, client: AsyncClient):
        response = await client.post("/api/v1/sync/stadiums")
        assert response.status_code == 404

    async def test_sync_status_lists_rows(self, client: AsyncClient, test_session):
        from fantasy_league.models import SyncStatus

        test_session.add(SyncStatus(entity_type=EntityType.LEAGUES, last_synced_at=None))
        await test_session.commit()

        response = await client.get("/api/v1/sync/status")
        assert response.status_code == 200
        assert response.json() == [{"entity_type": "leagues", "last_synced_at": None}]


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}

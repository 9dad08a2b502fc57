"""
Sync services module.

This module contains the services that synchronize football reference data
from the Sportmonks API to the local database.

Services:
- IdDiscoveryService: Ids referenced by already stored entities
- EntitySaver: Generic fetch/map/upsert engine
- ReferenceSyncService: Leagues, seasons, clubs, fixtures, types, countries
- PlayerSyncService: Players with current-season statistics and club
- SyncScheduler: Per entity type freshness check and status tracking
- SyncOrchestrator: Coordinates full sync sweeps
"""
from fantasy_league.services.sync.base import BaseSyncService, upsert_statement
from fantasy_league.services.sync.errors import MappingError, SyncError
from fantasy_league.services.sync.discovery import IdDiscoveryService
from fantasy_league.services.sync.entity_saver import EntitySaver, SaveResult
from fantasy_league.services.sync.reference_sync import ReferenceSyncService
from fantasy_league.services.sync.player_sync import PlayerSyncService
from fantasy_league.services.sync.scheduler import (
    OutcomeStatus,
    SyncOutcome,
    SyncScheduler,
    SyncState,
)
from fantasy_league.services.sync.orchestrator import SYNC_ORDER, SyncOrchestrator

__all__ = [
    # Base
    "BaseSyncService",
    "upsert_statement",
    # Errors
    "SyncError",
    "MappingError",
    # Services
    "IdDiscoveryService",
    "EntitySaver",
    "SaveResult",
    "ReferenceSyncService",
    "PlayerSyncService",
    "SyncScheduler",
    "SyncState",
    "SyncOutcome",
    "OutcomeStatus",
    "SyncOrchestrator",
    "SYNC_ORDER",
]

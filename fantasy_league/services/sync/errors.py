class SyncError(Exception):
    """Base class for sync failures raised past the per-item boundary."""


class MappingError(SyncError):
    """A raw API record could not be mapped onto its schema."""

    def __init__(self, entity_name: str, key, message: str):
        super().__init__(f"{entity_name} (ID: {key}): {message}")
        self.entity_name = entity_name
        self.key = key

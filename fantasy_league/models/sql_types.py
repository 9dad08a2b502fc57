from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB

# PostgreSQL stores documents as JSONB, SQLite tests fall back to JSON.
JSON_DOCUMENT = JSON().with_variant(JSONB(), "postgresql")

# database/models/schema_version_model.py
from sqlalchemy import Column, String, DateTime, func
from database.db import Base


class SchemaVersion(Base):
    """
    One row per applied migration.
    """
    __tablename__ = "schema_version"

    migration_name = Column(String(255), primary_key=True)
    applied_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

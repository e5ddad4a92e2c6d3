"""
EnrichmentHistoryRecord model — one row per enrichment run (the audit trail).

Rows are inserted once and never updated.
"""
from sqlalchemy import Column, Integer, Text, Float, Boolean, DateTime, JSON
from sqlalchemy.sql import func

from lead_engine.database import Base


class EnrichmentHistoryRecord(Base):
    __tablename__ = 'enrichment_history'

    id = Column(Integer, primary_key=True, autoincrement=True)
    contact_id = Column(Text, nullable=True, index=True)
    enrichment_type = Column(Text, default='social_media')
    data_provider = Column(Text, nullable=False)
    fields_updated = Column(JSON, default=list)
    old_data = Column(JSON, nullable=True)
    new_data = Column(JSON, default=dict)
    confidence = Column(Float, default=0.0)
    processing_time = Column(Integer, default=0)     # milliseconds
    success = Column(Boolean, default=False)
    error_message = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

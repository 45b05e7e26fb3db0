"""
SQLAlchemy ORM Models for the state store

Defines MemoryStateRecord and ReviewEvent tables.
"""

from sqlalchemy import Column, DateTime, Float, Integer, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class MemoryStateRecord(Base):
    """
    Persistent memory state for a single item.

    One row per item_id; mirrors lexirecall.memory.MemoryState.
    """
    __tablename__ = 'memory_state'

    item_id = Column(String(255), primary_key=True, nullable=False)

    # Beta-distribution evidence
    success_weight = Column(Float, nullable=False)
    failure_weight = Column(Float, nullable=False)

    # Minutes until predicted recall is 0.5
    halflife = Column(Float, nullable=False)

    # Review tracking
    last_seen = Column(DateTime(timezone=True), nullable=True)  # NULL = never seen
    total_exposure = Column(Integer, nullable=False, default=0)
    due_at = Column(DateTime(timezone=True), nullable=False, index=True)

    def __repr__(self):
        return f"<MemoryStateRecord({self.item_id}, halflife={self.halflife:.1f})>"


class ReviewEvent(Base):
    """
    Log entry for a single interaction with an item.

    Captures state before/after the review, the observation, and session context.
    """
    __tablename__ = 'review_events'

    id = Column(Integer, primary_key=True, autoincrement=True)
    item_id = Column(String(255), nullable=False, index=True)

    # Observation
    timestamp = Column(DateTime(timezone=True), nullable=False)
    outcome = Column(String(20), nullable=False)  # "remembered" | "forgot"
    elapsed_ms = Column(Integer, nullable=True)
    assistance_count = Column(Integer, nullable=False, default=0)

    # State before review (NULL for first-ever review)
    halflife_before = Column(Float, nullable=True)
    success_weight_before = Column(Float, nullable=True)
    failure_weight_before = Column(Float, nullable=True)
    recall_before = Column(Float, nullable=True)

    # State after review
    halflife_after = Column(Float, nullable=False)
    success_weight_after = Column(Float, nullable=False)
    failure_weight_after = Column(Float, nullable=False)
    due_at = Column(DateTime(timezone=True), nullable=False)

    # Session context (optional, for analytics)
    session_id = Column(String(255), nullable=True)
    session_position = Column(Integer, nullable=True)

    def __repr__(self):
        return f"<ReviewEvent(id={self.id}, {self.item_id}, outcome={self.outcome})>"

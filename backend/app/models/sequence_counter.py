"""
Sequence counter database model.

One row per named sequence (``user_seq``, ``address_seq``, ``rider_seq``).
"""

from sqlalchemy import Column, BigInteger, String
from backend.app.db.session import Base


class SequenceCounter(Base):
    """
    Last value issued for a named sequence.

    Rows are created lazily on the first allocation and never deleted.
    ``value`` only ever grows by one per successful allocation.
    """
    __tablename__ = "sequence_counters"

    name = Column(String(100), primary_key=True)
    value = Column(BigInteger, nullable=False, default=0)

    def __repr__(self):
        return f"<SequenceCounter(name='{self.name}', value={self.value})>"

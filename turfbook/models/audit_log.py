from sqlalchemy import JSON, BigInteger, Column, DateTime, String, func
from sqlalchemy.dialects.postgresql import JSONB

from turfbook.core.database import Base, IdentifierType


class AuditLog(Base):
    __tablename__ = "audit_log"
    __table_args__ = {"schema": "reservation"}

    id_log = Column(IdentifierType, primary_key=True, index=True)
    action = Column(String(50), nullable=False, index=True)
    id_user = Column(BigInteger, nullable=False)
    id_field = Column(BigInteger, nullable=True)
    details = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=False, default=dict)
    timestamp = Column(DateTime(timezone=True), server_default=func.now())

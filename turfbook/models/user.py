"""SQLAlchemy model mapping to the auth.users table."""

from sqlalchemy import BigInteger, Column, String

from turfbook.core.database import Base, IdentifierType


class User(Base):
    """Represents a user from the authentication service."""

    __tablename__ = "users"
    __table_args__ = {"schema": "auth"}

    id_user = Column(IdentifierType, primary_key=True, index=True)
    username = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    role = Column(String(50), nullable=False, default="consumer")
    status = Column(String(30), nullable=False, default="active")

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<User(id_user={self.id_user}, email={self.email})>"

# authgate/adapters/outbound/persistence/models/user_model.py

"""
User model and its role association.
"""

from sqlalchemy import (
    Column,
    Boolean,
    Integer,
    String,
    DateTime,
    func,
    Table,
    ForeignKey,
)
from sqlalchemy.orm import relationship

from authgate.adapters.outbound.persistence.database import Base, IdType

# Many-to-many association between users and roles
sys_user_role = Table(
    "sys_user_role",
    Base.metadata,
    Column("user_id", IdType, ForeignKey("sys_user.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", IdType, ForeignKey("sys_role.id", ondelete="CASCADE"), primary_key=True),
)


class User(Base):
    """
    System user.

    Attributes:
        id: Numeric identifier
        username: Login name, unique
        password: bcrypt hash of the password
        status: 1 enabled, 0 disabled
        tenant_id: Owning tenant, optional
        deleted: Soft delete flag
        roles: Roles granted to the user
    """
    __tablename__ = "sys_user"

    id = Column(IdType, primary_key=True, autoincrement=True)
    username = Column(String(64), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)
    real_name = Column(String(64))
    email = Column(String(128))
    phone = Column(String(32))
    avatar = Column(String(255))
    status = Column(Integer, default=1, nullable=False)
    tenant_id = Column(IdType, nullable=True)
    created_time = Column(DateTime, server_default=func.now())
    updated_time = Column(DateTime, onupdate=func.now())
    deleted = Column(Boolean, default=False, nullable=False)

    roles = relationship("Role", secondary=sys_user_role, back_populates="users")

    def __repr__(self) -> str:
        return f"<User(username={self.username}, status={self.status})>"

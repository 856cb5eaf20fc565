# authgate/adapters/outbound/persistence/models/role_model.py

from sqlalchemy import Boolean, Column, ForeignKey, String, Table
from sqlalchemy.orm import relationship

from authgate.adapters.outbound.persistence.database import Base, IdType

# Many-to-many association between roles and permissions
sys_role_permission = Table(
    "sys_role_permission",
    Base.metadata,
    Column("role_id", IdType, ForeignKey("sys_role.id", ondelete="CASCADE"), primary_key=True),
    Column("permission_id", IdType, ForeignKey("sys_permission.id", ondelete="CASCADE"), primary_key=True),
)


class Role(Base):
    """Named set of permissions, e.g. ``ADMIN``."""
    __tablename__ = "sys_role"

    id = Column(IdType, primary_key=True, autoincrement=True)
    role_code = Column(String(64), unique=True, nullable=False, index=True)
    role_name = Column(String(64), nullable=False)
    description = Column(String(255))
    tenant_id = Column(IdType, nullable=True)
    deleted = Column(Boolean, default=False, nullable=False)

    permissions = relationship("Permission", secondary=sys_role_permission, back_populates="roles")
    users = relationship("User", secondary="sys_user_role", back_populates="roles")

    def __repr__(self) -> str:
        return f"<Role(role_code={self.role_code})>"

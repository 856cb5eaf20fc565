# authgate/adapters/outbound/persistence/models/permission_model.py

from sqlalchemy import Boolean, Column, Integer, String
from sqlalchemy.orm import relationship

from authgate.adapters.outbound.persistence.database import Base, IdType

PERMISSION_TYPE_MENU = 1
PERMISSION_TYPE_BUTTON = 2
PERMISSION_TYPE_API = 3


class Permission(Base):
    """
    Permission granted through roles.

    Attributes:
        permission_code: Authority string, e.g. ``user:create``
        permission_type: 1 menu, 2 button, 3 API
        parent_id: Parent permission in the menu tree
    """
    __tablename__ = "sys_permission"

    id = Column(IdType, primary_key=True, autoincrement=True)
    permission_code = Column(String(128), unique=True, nullable=False, index=True)
    permission_name = Column(String(64), nullable=False)
    permission_type = Column(Integer, default=PERMISSION_TYPE_API, nullable=False)
    parent_id = Column(IdType, nullable=True)
    path = Column(String(255))
    icon = Column(String(64))
    sort_order = Column(Integer, default=0, nullable=False)
    deleted = Column(Boolean, default=False, nullable=False)

    roles = relationship("Role", secondary="sys_role_permission", back_populates="permissions")

    def __repr__(self) -> str:
        return f"<Permission(permission_code={self.permission_code})>"

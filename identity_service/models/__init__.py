from identity_service.models.revoked_token import RevokedToken
from identity_service.models.role import Permission, Role, role_permissions
from identity_service.models.user import User, user_roles

__all__ = [
    "Permission",
    "RevokedToken",
    "Role",
    "User",
    "role_permissions",
    "user_roles",
]

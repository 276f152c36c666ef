from identity_service.services.users.dto import UserPublicOut, UserRegisterIn
from identity_service.services.users.service import DEFAULT_ROLE, UserService

__all__ = ["DEFAULT_ROLE", "UserPublicOut", "UserRegisterIn", "UserService"]

from registry.models.user import Role, User, UserRecord

__all__ = [
    "Role",
    "User",
    "UserRecord",
]

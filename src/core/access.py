"""Static access policy (core domain)."""

from __future__ import annotations

from core.config import AccessConfig


class AccessPolicy:
    """User whitelist plus admin membership checks.

    Admin status only gates write permission; an admin missing from a
    non-empty whitelist is still rejected.
    """

    def __init__(self, config: AccessConfig) -> None:
        self._allowed = frozenset(config.allowed_users)
        self._admins = frozenset(config.admin_users)
        self._operations = dict(config.allowed_operations)

    @property
    def whitelist_enabled(self) -> bool:
        return bool(self._allowed)

    @property
    def admin_count(self) -> int:
        return len(self._admins)

    def is_allowed(self, user_id: str) -> bool:
        if not self._allowed:
            return True
        return user_id in self._allowed

    def is_admin(self, user_id: str) -> bool:
        return user_id in self._admins

    def is_operation_enabled(self, operation: str) -> bool:
        """Return whether an operation kind is globally enabled (missing = disabled)."""

        return bool(self._operations.get(operation, False))

    @property
    def updates_enabled(self) -> bool:
        return self.is_operation_enabled("update")

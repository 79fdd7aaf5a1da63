"""User directory and the event-manager approval workflow."""

import logging

from venue_booking.domain.enums import Role
from venue_booking.domain.errors import ConflictError, ErrorCode, NotFoundError, ValidationError
from venue_booking.models import MAX_PASSWORD_BYTES, User
from venue_booking.stores.interfaces import UserStore

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, store: UserStore) -> None:
        self._store = store

    def register(self, username: str, email: str, password: str, role: Role | str = Role.CUSTOMER) -> User:
        """Create an account. Event managers start disabled until an admin approves them.

        Raises:
            ValidationError: If the role is unknown or ADMIN, or the password is too long.
            ConflictError: If the username or e-mail is taken.
        """
        if not isinstance(role, Role):
            try:
                role = Role(str(role).strip().upper())
            except ValueError:
                raise ValidationError(f"Invalid role '{role}'") from None
        if role == Role.ADMIN:
            raise ValidationError("You cannot register as admin")
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        if self._store.get_by_username(username) is not None:
            raise ConflictError("Username already exists", code=ErrorCode.DUPLICATE_ACCOUNT)
        if self._store.get_by_email(email) is not None:
            raise ConflictError("Email already exists", code=ErrorCode.DUPLICATE_ACCOUNT)

        user = User(username=username, email=email, role=role, enabled=role != Role.EVENT_MANAGER)
        user.set_password(password)
        user = self._store.save(user)
        logger.info("Registered %s as %s (enabled=%s)", username, role.value, user.enabled)
        return user

    def authenticate(self, username: str, password: str) -> User | None:
        user = self._store.get_by_username(username)
        if user is None or not user.check_password(password):
            logger.info("Failed login for %s", username)
            return None
        if not user.enabled:
            logger.info("Login refused for %s: awaiting approval", username)
            return None
        return user

    def find_user(self, user_id: int) -> User | None:
        return self._store.get(user_id)

    def get_user(self, user_id: int) -> User:
        user = self.find_user(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    def _get_manager(self, user_id: int) -> User:
        user = self.get_user(user_id)
        if user.role != Role.EVENT_MANAGER:
            raise ValidationError("User is not an event manager")
        return user

    def approve_manager(self, user_id: int) -> User:
        user = self._get_manager(user_id)
        user.enabled = True
        logger.info("Event manager %s approved", user.username)
        return self._store.save(user)

    def reject_manager(self, user_id: int) -> None:
        user = self._get_manager(user_id)
        logger.info("Event manager request from %s rejected", user.username)
        self._store.delete(user)

    def pending_managers(self) -> list[User]:
        return self._store.list_by_role(Role.EVENT_MANAGER, enabled=False)

    def approved_managers(self) -> list[User]:
        return self._store.list_by_role(Role.EVENT_MANAGER, enabled=True)

    def ensure_default_admin(self, username: str, email: str, password: str) -> bool:
        """Create the default admin when no admin exists. Returns True if one was created."""
        if self._store.exists_with_role(Role.ADMIN):
            logger.info("Admin user already exists")
            return False
        admin = User(username=username, email=email, role=Role.ADMIN, enabled=True)
        admin.set_password(password)
        self._store.save(admin)
        logger.info("Default admin user %s created", username)
        return True

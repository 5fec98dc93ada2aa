"""Admin catalogue: users, categories, zones and system settings."""

from __future__ import annotations

import logging
import re
import threading
from collections.abc import Iterable
from datetime import datetime, timezone

from civicreports.schemas.activity import ActivityType
from civicreports.schemas.admin import (
    Category,
    CategoryCreate,
    CategoryUpdate,
    SettingUpdate,
    SystemSetting,
    User,
    UserCreate,
    UserStats,
    UserUpdate,
    Zone,
    ZoneCreate,
    ZoneUpdate,
)
from civicreports.services.activity_log import ActivityLog

logger = logging.getLogger(__name__)

SYSTEM_ACTOR = "system"


def _now() -> datetime:
    return datetime.now(timezone.utc)


class AdminCatalog:
    """In-memory admin registries; every change lands in the activity log."""

    def __init__(self, activity_log: ActivityLog) -> None:
        self.activity_log = activity_log
        self._users: dict[str, User] = {}
        self._categories: dict[str, Category] = {}
        self._zones: dict[str, Zone] = {}
        self._settings: dict[str, SystemSetting] = {}
        self._last_ids: dict[str, int] = {}
        self._lock = threading.Lock()

    def _new_id(self, prefix: str, registry: dict) -> str:
        # Ids of deleted records are never handed out again
        n = self._last_ids.get(prefix, 0) + 1
        while f"{prefix}-{n}" in registry:
            n += 1
        self._last_ids[prefix] = n
        return f"{prefix}-{n}"

    def _log(self, type: ActivityType, title: str, description: str, item_id: str, actor: str) -> None:
        self.activity_log.append(
            type=type,
            title=title,
            description=description,
            related_item_id=item_id,
            user_id=actor,
            user_name=actor,
        )

    def load(
        self,
        users: Iterable[User] = (),
        categories: Iterable[Category] = (),
        zones: Iterable[Zone] = (),
        settings: Iterable[SystemSetting] = (),
    ) -> None:
        """Register existing records as they are, without logging."""
        with self._lock:
            self._users.update({u.id: u for u in users})
            self._categories.update({c.id: c for c in categories})
            self._zones.update({z.id: z for z in zones})
            self._settings.update({s.id: s for s in settings})
            for prefix, registry in (("user", self._users), ("category", self._categories), ("zone", self._zones)):
                suffixes = [int(key.rsplit("-", 1)[1]) for key in registry if re.fullmatch(rf"{prefix}-\d+", key)]
                self._last_ids[prefix] = max([self._last_ids.get(prefix, 0), *suffixes])

    # -- users -----------------------------------------------------------

    def list_users(self, query: str | None = None, role: str | None = None) -> list[User]:
        users = list(self._users.values())
        if role:
            users = [u for u in users if u.role == role]
        if query:
            q = query.lower()
            users = [u for u in users if q in u.name.lower() or q in u.email.lower()]
        return [u.model_copy() for u in users]

    def get_user(self, user_id: str) -> User | None:
        user = self._users.get(user_id)
        return user.model_copy() if user else None

    def _email_taken(self, email: str, user_id: str | None = None) -> bool:
        return any(u.email == email and u.id != user_id for u in self._users.values())

    def _name_taken(self, name: str, category_id: str | None = None) -> bool:
        return any(c.name.lower() == name.lower() and c.id != category_id for c in self._categories.values())

    def create_user(self, data: UserCreate, actor: str = SYSTEM_ACTOR) -> User:
        with self._lock:
            if self._email_taken(data.email):
                raise ValueError("Email already registered")
            user = User(
                id=self._new_id("user", self._users),
                created_at=_now(),
                **data.model_dump(exclude={"password"}),
            )
            self._users[user.id] = user
        logger.info("User created: id=%s role=%s", user.id, user.role)
        self._log(ActivityType.USER_CREATED, "User created", f"{user.name} joined as {user.role}", user.id, actor)
        return user.model_copy()

    def update_user(self, user_id: str, data: UserUpdate, actor: str = SYSTEM_ACTOR) -> User | None:
        changes = data.model_dump(exclude_unset=True, exclude={"password"})
        changes = {k: v for k, v in changes.items() if v is not None}
        with self._lock:
            current = self._users.get(user_id)
            if current is None:
                return None
            if "email" in changes and self._email_taken(changes["email"], user_id):
                raise ValueError("Email already registered")
            updated = current.model_copy(update=changes)
            self._users[user_id] = updated
        if updated != current:
            self._log(ActivityType.USER_UPDATED, "User updated", f"{updated.name} profile updated", user_id, actor)
        return updated.model_copy()

    def deactivate_user(self, user_id: str, actor: str = SYSTEM_ACTOR) -> User | None:
        with self._lock:
            current = self._users.get(user_id)
            if current is None:
                return None
            if not current.active:
                return current.model_copy()
            updated = current.model_copy(update={"active": False})
            self._users[user_id] = updated
        self._log(ActivityType.USER_DEACTIVATED, "User deactivated", f"{updated.name} was deactivated", user_id, actor)
        return updated.model_copy()

    def delete_user(self, user_id: str, actor: str = SYSTEM_ACTOR) -> bool:
        """Remove the user. Reports assigned to them are left as they are."""
        with self._lock:
            user = self._users.pop(user_id, None)
        if user is None:
            return False
        logger.info("User deleted: id=%s", user_id)
        self._log(ActivityType.USER_DELETED, "User deleted", f"{user.name} was removed", user_id, actor)
        return True

    def user_stats(self) -> UserStats:
        users = list(self._users.values())
        return UserStats(
            total=len(users),
            active=sum(1 for u in users if u.active),
            inactive=sum(1 for u in users if not u.active),
            admins=sum(1 for u in users if u.role == "admin"),
            supervisors=sum(1 for u in users if u.role == "supervisor"),
            mobile=sum(1 for u in users if u.role == "mobile"),
        )

    # -- categories ------------------------------------------------------

    def list_categories(self, active_only: bool = False) -> list[Category]:
        return [c.model_copy() for c in self._categories.values() if c.active or not active_only]

    def get_category(self, category_id: str) -> Category | None:
        category = self._categories.get(category_id)
        return category.model_copy() if category else None

    def create_category(self, data: CategoryCreate, actor: str = SYSTEM_ACTOR) -> Category:
        with self._lock:
            if self._name_taken(data.name):
                raise ValueError("Category already exists")
            category = Category(id=self._new_id("category", self._categories), created_at=_now(), **data.model_dump())
            self._categories[category.id] = category
        self._log(ActivityType.CATEGORY_CREATED, "Category created", f"{category.name} added", category.id, actor)
        return category.model_copy()

    def update_category(self, category_id: str, data: CategoryUpdate, actor: str = SYSTEM_ACTOR) -> Category | None:
        changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
        with self._lock:
            current = self._categories.get(category_id)
            if current is None:
                return None
            if "name" in changes and self._name_taken(changes["name"], category_id):
                raise ValueError("Category already exists")
            updated = current.model_copy(update=changes)
            self._categories[category_id] = updated
        if updated != current:
            self._log(ActivityType.CATEGORY_UPDATED, "Category updated", f"{updated.name} updated", category_id, actor)
        return updated.model_copy()

    def delete_category(self, category_id: str, actor: str = SYSTEM_ACTOR) -> bool:
        with self._lock:
            category = self._categories.pop(category_id, None)
        if category is None:
            return False
        self._log(ActivityType.CATEGORY_DELETED, "Category deleted", f"{category.name} removed", category_id, actor)
        return True

    # -- zones -----------------------------------------------------------

    def list_zones(self) -> list[Zone]:
        return [z.model_copy() for z in self._zones.values()]

    def create_zone(self, data: ZoneCreate, actor: str = SYSTEM_ACTOR) -> Zone:
        with self._lock:
            zone = Zone(id=self._new_id("zone", self._zones), created_at=_now(), **data.model_dump())
            self._zones[zone.id] = zone
        self._log(ActivityType.ZONE_CREATED, "Zone created", f"{zone.name} added", zone.id, actor)
        return zone.model_copy()

    def update_zone(self, zone_id: str, data: ZoneUpdate, actor: str = SYSTEM_ACTOR) -> Zone | None:
        changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
        with self._lock:
            current = self._zones.get(zone_id)
            if current is None:
                return None
            updated = current.model_copy(update=changes)
            self._zones[zone_id] = updated
        if updated != current:
            self._log(ActivityType.ZONE_UPDATED, "Zone updated", f"{updated.name} updated", zone_id, actor)
        return updated.model_copy()

    def delete_zone(self, zone_id: str, actor: str = SYSTEM_ACTOR) -> bool:
        with self._lock:
            zone = self._zones.pop(zone_id, None)
        if zone is None:
            return False
        self._log(ActivityType.ZONE_DELETED, "Zone deleted", f"{zone.name} removed", zone_id, actor)
        return True

    # -- settings --------------------------------------------------------

    def list_settings(self, group: str | None = None) -> list[SystemSetting]:
        return [s.model_copy() for s in self._settings.values() if group is None or s.group == group]

    def update_setting(self, setting_id: str, data: SettingUpdate, actor: str = SYSTEM_ACTOR) -> SystemSetting | None:
        with self._lock:
            current = self._settings.get(setting_id)
            if current is None:
                return None
            updated = current.model_copy(update={"value": data.value})
            self._settings[setting_id] = updated
        if updated.value != current.value:
            self._log(
                ActivityType.SETTING_UPDATED,
                "Setting updated",
                f"{updated.key} set to {updated.value}",
                setting_id,
                actor,
            )
        return updated.model_copy()

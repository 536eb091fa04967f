"""Supporters backing guilds with extra limits."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from record_store.models import ABSENT, Record

if TYPE_CHECKING:
    from record_store.store import RecordStore

DEFAULT_MAX_GUILDS = 1


class Supporter(Record):
    """A user whose support applies to a list of guilds."""

    collection = "supporters"

    @property
    def patron(self) -> bool:
        return bool(self.get_field("patron"))

    @patron.setter
    def patron(self, value: bool) -> None:
        self.data["patron"] = value

    @property
    def guilds(self) -> list[str]:
        return self.data.setdefault("guilds", [])

    @property
    def max_guilds(self) -> int | None:
        return self.get_field("max_guilds")

    @max_guilds.setter
    def max_guilds(self, value: int | None) -> None:
        self.data["max_guilds"] = value

    @property
    def expire_at(self) -> datetime | None:
        raw = self.get_field("expire_at")
        if raw is None:
            return None
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        expire_at = datetime.fromisoformat(raw)
        if expire_at.tzinfo is None:
            expire_at = expire_at.replace(tzinfo=timezone.utc)
        return expire_at

    @expire_at.setter
    def expire_at(self, value: datetime | None) -> None:
        self.data["expire_at"] = None if value is None else value.isoformat()

    @property
    def comment(self) -> str | None:
        return self.get_field("comment")

    @comment.setter
    def comment(self, value: str | None) -> None:
        self.data["comment"] = value

    def get_max_guilds(self) -> int:
        return self.max_guilds or DEFAULT_MAX_GUILDS

    def is_valid(self, now: datetime | None = None) -> bool:
        """Whether the support has not expired."""
        expire_at = self.expire_at
        if expire_at is None:
            return True
        return expire_at > (now or datetime.now(timezone.utc))

    def can_add_guild(self) -> bool:
        return len(self.guilds) < self.get_max_guilds()

    def add_guild(self, guild_id: str) -> None:
        """Back a guild.

        Raises:
            ValueError: The guild is already backed or the limit is reached.
        """
        if guild_id in self.guilds:
            raise ValueError(f"Guild {guild_id} is already backed")
        if not self.can_add_guild():
            raise ValueError(f"Cannot back more than {self.get_max_guilds()} guilds")
        self.guilds.append(guild_id)

    def remove_guild(self, guild_id: str) -> None:
        if guild_id not in self.guilds:
            raise ValueError(f"Guild {guild_id} is not backed")
        self.guilds.remove(guild_id)

    def to_object(self) -> dict[str, Any]:
        return {
            "_id": self.id if self.id is not None else ABSENT,
            "patron": self.patron,
            "guilds": list(self.guilds),
            "max_guilds": self.max_guilds if self.max_guilds is not None else ABSENT,
            "expire_at": self.get_field("expire_at") or ABSENT,
            "comment": self.comment or ABSENT,
        }

    @classmethod
    async def get_valid_guilds(
        cls, store: RecordStore, now: datetime | None = None
    ) -> list[str]:
        """Guild ids backed by any supporter whose support is still valid."""
        guilds: list[str] = []
        for supporter in await store.get_all(cls):
            if not supporter.is_valid(now):
                continue
            for guild_id in supporter.guilds:
                if guild_id not in guilds:
                    guilds.append(guild_id)
        return guilds

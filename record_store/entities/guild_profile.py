"""Per-guild settings."""
from __future__ import annotations

from typing import Any

from record_store.models import ABSENT, Record


class GuildProfile(Record):
    """Settings of one guild, keyed by the guild id."""

    collection = "profiles"

    @property
    def name(self) -> str | None:
        return self.get_field("name")

    @name.setter
    def name(self, value: str) -> None:
        self.data["name"] = value

    @property
    def prefix(self) -> str | None:
        return self.get_field("prefix")

    @prefix.setter
    def prefix(self, value: str | None) -> None:
        self.data["prefix"] = value

    @property
    def locale(self) -> str | None:
        return self.get_field("locale")

    @locale.setter
    def locale(self, value: str | None) -> None:
        self.data["locale"] = value

    @property
    def timezone(self) -> str | None:
        return self.get_field("timezone")

    @timezone.setter
    def timezone(self, value: str | None) -> None:
        self.data["timezone"] = value

    @property
    def date_format(self) -> str | None:
        return self.get_field("date_format")

    @date_format.setter
    def date_format(self, value: str | None) -> None:
        self.data["date_format"] = value

    @property
    def alert(self) -> list[str]:
        """User ids notified about feed failures."""
        return self.data.setdefault("alert", [])

    def to_object(self) -> dict[str, Any]:
        # Unset optional settings are left out of the stored document
        return {
            "_id": self.id if self.id is not None else ABSENT,
            "name": self.name,
            "prefix": self.prefix or ABSENT,
            "locale": self.locale or ABSENT,
            "timezone": self.timezone or ABSENT,
            "date_format": self.date_format or ABSENT,
            "alert": list(self.alert),
        }

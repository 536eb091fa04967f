"""Domain records."""
from record_store.entities.guild_profile import GuildProfile
from record_store.entities.supporter import Supporter

__all__ = ["GuildProfile", "Supporter"]

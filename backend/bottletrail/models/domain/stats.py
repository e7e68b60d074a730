"""Statistics models."""

from pydantic import BaseModel, Field
from datetime import datetime, timezone


class UserStats(BaseModel):
    """Lifetime counters for one user, recomputed from the event log."""
    created: int = 0
    found: int = 0
    retossed: int = 0


class GlobalStats(BaseModel):
    """System-wide counters."""
    total_bottles: int = 0
    total_found: int = 0
    total_retossed: int = 0
    active_bottles: int = 0


class ProfileCounters(BaseModel):
    """Incremental counters maintained by the write path on user_profiles."""
    username: str
    total_bottles_created: int = 0
    total_bottles_found: int = 0
    total_bottles_retossed: int = 0

    def as_stats(self) -> UserStats:
        return UserStats(
            created=self.total_bottles_created,
            found=self.total_bottles_found,
            retossed=self.total_bottles_retossed,
        )


class StatsDiscrepancy(BaseModel):
    """A user whose incremental counters disagree with the recomputed stats."""
    username: str
    recorded: UserStats
    recomputed: UserStats


class StatsReconciliation(BaseModel):
    """Outcome of comparing every profile's counters with the event log."""
    checked_users: int = 0
    discrepancies: list[StatsDiscrepancy] = Field(default_factory=list)
    consistent: bool = True
    checked_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

"""
Pig Dice - Storage Models

Pydantic models for the persisted blobs. Field aliases are the exact keys
written to storage.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from pigdice.engine.base import Side


class ScoreboardRecord(BaseModel):
    """Lifetime win/loss tally for both sides."""

    wins_first: int = Field(default=0, ge=0, alias="winsFirst")
    losses_first: int = Field(default=0, ge=0, alias="lossesFirst")
    wins_second: int = Field(default=0, ge=0, alias="winsSecond")
    losses_second: int = Field(default=0, ge=0, alias="lossesSecond")

    model_config = {
        "frozen": True,
        "strict": True,
        "populate_by_name": True,
    }

    @classmethod
    def from_json(cls, blob: str | bytes) -> ScoreboardRecord:
        """Parse a stored blob. Every counter must be present.

        Raises:
            ValueError: If the blob is not a complete, valid record
        """
        record = cls.model_validate_json(blob)
        missing = set(cls.model_fields) - record.model_fields_set
        if missing:
            raise ValueError(f"Scoreboard blob is missing {sorted(missing)}.")
        return record

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)

    def wins_for(self, side: Side) -> int:
        return self.wins_first if side is Side.FIRST else self.wins_second

    def losses_for(self, side: Side) -> int:
        return self.losses_first if side is Side.FIRST else self.losses_second

    def record_win(self, winner: Side) -> ScoreboardRecord:
        """Return a copy with one win for ``winner`` and one loss for the other side."""
        if winner is Side.FIRST:
            return self.model_copy(update={
                "wins_first": self.wins_first + 1,
                "losses_second": self.losses_second + 1,
            })
        return self.model_copy(update={
            "wins_second": self.wins_second + 1,
            "losses_first": self.losses_first + 1,
        })

    @property
    def total_wins(self) -> int:
        return self.wins_first + self.wins_second

    @property
    def total_losses(self) -> int:
        return self.losses_first + self.losses_second

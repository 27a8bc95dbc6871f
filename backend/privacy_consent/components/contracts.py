"""
Contract models for the consent codec.

All models are frozen: a decoded state is read-only for the rest of the request,
and an ask is not mutated once queued.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, StrictBool, model_validator


class ConsentMatrix(BaseModel):
    """Dense category x purpose grid; rows follow ``categories``, columns ``purposes``"""

    model_config = ConfigDict(frozen=True)

    categories: Tuple[str, ...]
    purposes: Tuple[str, ...]
    cells: Tuple[Tuple[StrictBool, ...], ...]

    @model_validator(mode="after")
    def check_shape(self) -> "ConsentMatrix":
        if len(self.cells) != len(self.categories):
            raise ValueError(
                f"matrix has {len(self.cells)} rows for {len(self.categories)} categories"
            )
        for category, row in zip(self.categories, self.cells):
            if len(row) != len(self.purposes):
                raise ValueError(
                    f"row '{category}' has {len(row)} cells for {len(self.purposes)} purposes"
                )
        return self


class ConsentState(BaseModel):
    """Decoded inbound preference"""

    model_config = ConfigDict(frozen=True)

    matrix: ConsentMatrix
    tracking: Tuple[str, ...] = ()
    preference_communicated: bool = Field(
        default=False,
        description="True iff a header was present and parsed, even if it allows nothing",
    )


class AskRequest(BaseModel):
    """Outbound request for additional consent"""

    model_config = ConfigDict(frozen=True)

    matrix: ConsentMatrix
    tracking: Tuple[str, ...] = ()
    reason: str = ""
    id: str = ""


class UnknownToken(BaseModel):
    """Decode diagnostic: a token that matched neither vocabulary and was skipped"""

    model_config = ConfigDict(frozen=True)

    token: str
    group: str


class DataCollectionEvent(BaseModel):
    """Audit record of data collected while serving a request"""

    model_config = ConfigDict(frozen=True)

    category: str
    purpose: str
    description: Optional[str] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

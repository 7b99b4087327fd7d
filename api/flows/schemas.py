"""
Pydantic schemas for passenger-flow records.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

ARRIVAL = "Arrival"
DEPARTURE = "Departure"

CATEGORIES = ("Local", "Mainland", "Others")


class FlowEntry(BaseModel):
    """
    One side (arrival or departure) of a day's record, as posted by clients.

    Counts must be JSON integers and no other keys are accepted: the entry is
    stored as posted, so nothing is coerced or dropped.
    """

    model_config = ConfigDict(extra="forbid")

    Flow: Literal["Arrival", "Departure"]
    Local: int = Field(..., ge=0, strict=True)
    Mainland: int = Field(..., ge=0, strict=True)
    Others: int = Field(..., ge=0, strict=True)


FlowEntryList = TypeAdapter(list[FlowEntry])

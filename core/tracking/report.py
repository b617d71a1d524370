from __future__ import annotations

from typing import AbstractSet, Iterable, List

from pydantic import BaseModel, ConfigDict, Field


class CompletenessReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_complete: bool
    missing_fields: List[str] = Field(default_factory=list)

    def describe(self) -> str:
        if self.is_complete:
            return "all fields set"
        return ", ".join(self.missing_fields)


def build_report(field_set: Iterable[str], assigned: AbstractSet[str]) -> CompletenessReport:
    """
    Snapshot of which declared fields have been written.
    Recomputed on every call: the assigned set keeps changing after a query.
    """
    missing = [name for name in field_set if name not in assigned]
    return CompletenessReport(is_complete=not missing, missing_fields=missing)

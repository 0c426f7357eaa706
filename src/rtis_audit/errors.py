"""Input errors that abort a trip analysis before any matching happens."""

from __future__ import annotations

from typing import Sequence

import pandas as pd

__all__ = [
    "AnalysisInputError",
    "MissingRequiredColumn",
    "EmptyTimeWindow",
    "InvalidTimeWindow",
    "NoValidTelemetry",
]


class AnalysisInputError(ValueError):
    """Base class for fatal, caller-correctable analysis input problems."""

    kind = "AnalysisInputError"


class MissingRequiredColumn(AnalysisInputError):
    """A telemetry or asset source lacks a resolvable required column."""

    kind = "MissingRequiredColumn"

    def __init__(self, source: str, missing: Sequence[str]) -> None:
        self.source = source
        self.missing = tuple(missing)
        super().__init__(
            f"{source} is missing required column(s): {', '.join(self.missing)}."
        )


class InvalidTimeWindow(AnalysisInputError):
    """A window bound cannot be parsed, or arrival is not after departure."""

    kind = "InvalidTimeWindow"

    def __init__(self, departure: object, arrival: object, reason: str | None = None) -> None:
        self.departure = departure
        self.arrival = arrival
        if reason is None:
            reason = (
                f"Arrival time {_describe(arrival)} must be after departure time "
                f"{_describe(departure)}."
            )
        super().__init__(reason)


def _describe(value: object) -> str:
    if isinstance(value, pd.Timestamp):
        return value.isoformat()
    return repr(value)


class EmptyTimeWindow(AnalysisInputError):
    """The requested trip window excludes every telemetry sample."""

    kind = "EmptyTimeWindow"

    def __init__(
        self,
        departure: pd.Timestamp | None,
        arrival: pd.Timestamp | None,
        available_start: pd.Timestamp,
        available_end: pd.Timestamp,
    ) -> None:
        self.departure = departure
        self.arrival = arrival
        self.available_start = available_start
        self.available_end = available_end
        requested = (
            f"{departure.isoformat() if departure is not None else '-'} .. "
            f"{arrival.isoformat() if arrival is not None else '-'}"
        )
        super().__init__(
            f"No telemetry inside the window {requested}; data covers "
            f"{available_start.isoformat()} .. {available_end.isoformat()}."
        )


class NoValidTelemetry(AnalysisInputError):
    """No telemetry rows survived coordinate cleaning."""

    kind = "NoValidTelemetry"

    def __init__(self, total_rows: int) -> None:
        self.total_rows = total_rows
        super().__init__(
            f"None of the {total_rows} telemetry row(s) carry usable coordinates."
        )

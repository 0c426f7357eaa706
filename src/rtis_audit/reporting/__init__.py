"""Report payload builders."""

from .tables import (
    RESULT_COLUMNS,
    result_to_payload,
    results_to_csv,
    results_to_frame,
    summary_to_dict,
)

__all__ = [
    "RESULT_COLUMNS",
    "result_to_payload",
    "results_to_csv",
    "results_to_frame",
    "summary_to_dict",
]

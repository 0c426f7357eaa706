from __future__ import annotations

import numpy as np
import pandas as pd

from rtis_audit import utils
from rtis_audit.utils import to_utc_series, to_utc_timestamp


def test_to_utc_series_handles_mixed_inputs() -> None:
    series = pd.Series(
        [
            "2023-01-01T00:00:00Z",
            "2023-01-01 01:00:00",
            pd.Timestamp("2023-01-01T02:00:00-05:00"),
            pd.Timestamp("2023-01-01T03:00:00"),
            None,
            np.nan,
            "invalid",
        ]
    )

    result = to_utc_series(series)

    assert isinstance(result.dtype, pd.DatetimeTZDtype)
    assert str(result.dt.tz) == "UTC"
    assert result.isna().tolist() == [False, False, False, False, True, True, True]
    assert list(result.iloc[:4]) == [
        pd.Timestamp("2023-01-01T00:00:00Z"),
        pd.Timestamp("2023-01-01T01:00:00Z"),
        pd.Timestamp("2023-01-01T07:00:00Z"),
        pd.Timestamp("2023-01-01T03:00:00Z"),
    ]


def test_to_utc_series_localizes_naive_datetime_dtype() -> None:
    series = pd.Series(pd.date_range("2024-01-01", periods=2, freq="s"))

    result = to_utc_series(series)

    assert result.iloc[1] == pd.Timestamp("2024-01-01T00:00:01Z")


def test_to_utc_timestamp_rejects_empty_and_garbage() -> None:
    assert to_utc_timestamp(None) is None
    assert to_utc_timestamp("  ") is None
    assert to_utc_timestamp(float("nan")) is None
    assert to_utc_timestamp("not a time") is None
    assert to_utc_timestamp("2024-01-01T05:30:00+05:30") == pd.Timestamp("2024-01-01T00:00:00Z")


def test_dayfirst_reads_every_slash_date_the_same_way() -> None:
    series = pd.Series(["05/01/2024 23:59:58", "05/01/2024 23:59:59", "13/01/2024 00:00:00"])

    result = to_utc_series(series, dayfirst=True)

    assert list(result) == [
        pd.Timestamp("2024-01-05T23:59:58Z"),
        pd.Timestamp("2024-01-05T23:59:59Z"),
        pd.Timestamp("2024-01-13T00:00:00Z"),
    ]


def test_format_parses_whole_column_and_coerces_misfits() -> None:
    series = pd.Series(["05/01/2024 08:00:00", "13/01/2024 08:00:00", "2024-01-05 08:00:00", None])

    result = to_utc_series(series, format="%d/%m/%Y %H:%M:%S")

    assert result.iloc[0] == pd.Timestamp("2024-01-05T08:00:00Z")
    assert result.iloc[1] == pd.Timestamp("2024-01-13T08:00:00Z")
    assert result.isna().tolist() == [False, False, True, True]


def test_to_utc_timestamp_dayfirst() -> None:
    assert to_utc_timestamp("02/03/2024 10:00") == pd.Timestamp("2024-02-03T10:00:00Z")
    assert to_utc_timestamp("02/03/2024 10:00", dayfirst=True) == pd.Timestamp(
        "2024-03-02T10:00:00Z"
    )


def test_public_time_helpers() -> None:
    assert {"is_blank", "to_utc_series", "to_utc_timestamp"} <= set(utils.__all__)
    assert not hasattr(utils, "to_iso")
    assert utils.is_blank(" ") and utils.is_blank(pd.NaT) and not utils.is_blank(0)

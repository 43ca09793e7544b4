"""
Flight log ingestion.

Turns the raw flight log table into an ordered ``TelemetrySequence`` and
restricts it to the rows recorded while the onboard camera was running.

Cells are typed one by one rather than per column, so a single garbled
value does not turn the whole column into text:

>>> coerce_cell(" 12.5 "), coerce_cell("7"), coerce_cell("TRUE"), coerce_cell("")
(12.5, 7, True, None)
"""

from __future__ import annotations

import io
import logging
import pathlib
import re

import pandas as pd

from drone_overlay.errors import EmptyResult, MalformedInput
from drone_overlay.telemetry import CellValue, TelemetryRecord, TelemetrySequence

logger = logging.getLogger(__name__)

_INT_RE = re.compile(r"^\s*-?\d+\s*$")
_FLOAT_RE = re.compile(r"^\s*-?(\d+\.?|\.\d+|\d+\.\d+)([eE][-+]?\d+)?\s*$")
_TRUE_SPELLINGS = ("true", "TRUE")
_FALSE_SPELLINGS = ("false", "FALSE")

# Numbers at or beyond 2**53 lose precision as floats and are kept as text
_MAX_SAFE_INTEGER = 2**53
_MAX_SAFE_DIGITS = len(str(_MAX_SAFE_INTEGER))


def coerce_cell(raw: object) -> CellValue:
    """Type a single cell: numbers become numbers, everything else stays text."""
    if not isinstance(raw, str):
        # Missing trailing fields come back from pandas as NaN
        return None
    if raw == "":
        return None
    if raw in _TRUE_SPELLINGS:
        return True
    if raw in _FALSE_SPELLINGS:
        return False
    if _INT_RE.match(raw):
        digits = raw.strip().lstrip("-").lstrip("0")
        # int() refuses strings past a few thousand digits
        if len(digits) <= _MAX_SAFE_DIGITS and abs(int(raw)) < _MAX_SAFE_INTEGER:
            return int(raw)
        return raw
    if _FLOAT_RE.match(raw):
        value = float(raw)
        return value if abs(value) < _MAX_SAFE_INTEGER else raw
    return raw


def _decode(source: str | bytes) -> str:
    if isinstance(source, bytes):
        try:
            text = source.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise MalformedInput(f"Flight log is not UTF-8 text: {exc}") from exc
    else:
        text = source

    if "\x00" in text:
        raise MalformedInput("Flight log contains NUL bytes, expected tabular text")
    return text


def parse_flight_log(source: str | bytes) -> TelemetrySequence:
    """
    Parse flight log text (header row + data rows) into telemetry records.

    Args:
        source: The flight log as text or raw bytes (UTF-8).

    Returns:
        TelemetrySequence: One record per data row, in log order.

    Raises:
        MalformedInput: The text cannot be read as a table at all. Individual
            malformed cells never raise; they fail the later finiteness checks.
    """
    text = _decode(source)

    try:
        df = pd.read_csv(
            io.StringIO(text),
            dtype=str,
            index_col=False,
            na_filter=False,
            skip_blank_lines=True,
        )
    except pd.errors.EmptyDataError as exc:
        raise MalformedInput("Flight log has no header row") from exc
    except pd.errors.ParserError as exc:
        raise MalformedInput(f"Flight log is not a valid table: {exc}") from exc

    df.columns = [str(c).strip() for c in df.columns]

    records = tuple(
        TelemetryRecord.from_row({k: coerce_cell(v) for k, v in row.items()})
        for row in df.to_dict(orient="records")
    )

    logger.info(f"Parsed {len(records)} flight log rows ({len(df.columns)} columns)")
    return records


def read_flight_log(path: pathlib.Path) -> TelemetrySequence:
    try:
        data = pathlib.Path(path).read_bytes()
    except OSError as exc:
        raise MalformedInput(f"Could not read flight log {path}: {exc}") from exc
    return parse_flight_log(data)


def filter_video_phase(sequence: TelemetrySequence) -> TelemetrySequence:
    """Keep only rows recorded while the camera was running, in log order."""
    video_records = tuple(r for r in sequence if r.is_video_phase)

    dropped = len(sequence) - len(video_records)
    if dropped > 0:
        logger.info(
            f"Video phase filter: dropped {dropped}/{len(sequence)} rows "
            f"recorded outside the video phase."
        )

    if not video_records:
        raise EmptyResult("No video observations found in flight log")

    invalid = sum(1 for r in video_records if not r.has_valid_coordinates)
    if invalid > 0:
        logger.warning(
            f"{invalid}/{len(video_records)} video phase rows have no usable "
            f"latitude/longitude and will not be projected."
        )

    return video_records


def load_video_phase_sequence(source: str | bytes) -> TelemetrySequence:
    return filter_video_phase(parse_flight_log(source))

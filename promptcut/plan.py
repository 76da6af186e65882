"""Action plan validator — the only place the instruction service's JSON is read.

The raw object never leaves this module; callers get one of the typed
variants from :mod:`promptcut.models`.
"""

import json
import math
from typing import Any

from promptcut.errors import (
    InvalidRangeError,
    MalformedResponseError,
    UnrecognizedActionError,
)
from promptcut.models import (
    ACTIONS,
    ActionPlan,
    CutAction,
    MuteAction,
    SplitAction,
    TimeRange,
    UnmuteAction,
)


def _is_number(value: Any) -> bool:
    # bool is an int subclass; JSON true/false are not seconds.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(float(value))
    except OverflowError:
        return False


def _check_range(start: Any, end: Any, index: int | None = None) -> TimeRange:
    where = f" in part {index + 1} (index {index})" if index is not None else ""

    for label, value in (("start", start), ("end", end)):
        if value is None:
            raise InvalidRangeError(f"Missing '{label}'{where}", index=index)
        if not _is_number(value):
            raise InvalidRangeError(
                f"'{label}' must be a number of seconds, got {value!r}{where}",
                index=index,
            )
        if value < 0:
            raise InvalidRangeError(f"'{label}' must not be negative{where}", index=index)

    if start > end:
        raise InvalidRangeError(
            f"start ({start}) is after end ({end}){where}", index=index
        )
    return TimeRange(start=float(start), end=float(end))


def _parse_split(data: dict) -> SplitAction:
    starts = data.get("start")
    ends = data.get("end")

    if not isinstance(starts, list) or not isinstance(ends, list):
        raise InvalidRangeError("split requires 'start' and 'end' lists")
    if len(starts) != len(ends):
        raise InvalidRangeError(
            f"split has {len(starts)} start markers but {len(ends)} end markers"
        )
    if not starts:
        raise InvalidRangeError("split requires at least one range")

    ranges = tuple(_check_range(s, e, index=i) for i, (s, e) in enumerate(zip(starts, ends)))
    return SplitAction(ranges=ranges)


def validate(raw_text: str) -> ActionPlan:
    """Parse and validate the instruction service's response.

    Raises:
        MalformedResponseError: the text is not a JSON object.
        UnrecognizedActionError: ``action`` is absent or not a known tag.
        InvalidRangeError: a cut/split bound is unusable.
    """
    if not isinstance(raw_text, str):
        raise MalformedResponseError(f"Expected JSON text, got {type(raw_text).__name__}")

    try:
        data = json.loads(raw_text)
    except ValueError as e:
        # JSONDecodeError, or an integer literal past the digit limit.
        raise MalformedResponseError(f"Response is not valid JSON: {getattr(e, 'msg', e)}") from e

    if not isinstance(data, dict):
        raise MalformedResponseError("Response must be a JSON object")

    action = data.get("action")
    if not isinstance(action, str) or action not in ACTIONS:
        raise UnrecognizedActionError(f"Unrecognized action: {action!r}")

    if action == "cut":
        r = _check_range(data.get("start"), data.get("end"))
        return CutAction(start=r.start, end=r.end)
    if action == "split":
        return _parse_split(data)
    if action == "mute":
        return MuteAction()
    return UnmuteAction()

"""Trim editor — extracts one time range of the input into a new file."""

import asyncio
from pathlib import Path

from promptcut import ffutil
from promptcut.errors import MediaProcessingError
from promptcut.models import MediaAsset

# Allowed overshoot of ``end`` past the probed duration (container rounding).
BOUNDS_TOLERANCE = 0.1


def _trim_blocking(input_path: Path, start: float, end: float, output_path: Path) -> Path:
    duration = ffutil.probe(input_path).duration
    if start >= duration or end > duration + BOUNDS_TOLERANCE:
        raise MediaProcessingError(
            f"Range {start}-{end}s is outside the input duration ({duration:.2f}s)"
        )
    return ffutil.trim(input_path, start, end, output_path)


async def trim_range(asset: MediaAsset, start: float, end: float, output_path: Path) -> Path:
    """Write ``[start, end)`` of ``asset`` to ``output_path``.

    Suspends the caller while ffmpeg runs in the loop's executor. On failure
    any partial output is removed and MediaProcessingError is raised.
    """
    loop = asyncio.get_running_loop()
    try:
        return await loop.run_in_executor(
            None, _trim_blocking, asset.path, start, end, output_path
        )
    except MediaProcessingError:
        output_path.unlink(missing_ok=True)
        raise

"""Mute editor — drops the audio track."""

import asyncio
from pathlib import Path

from promptcut import ffutil
from promptcut.errors import MediaProcessingError
from promptcut.models import MediaAsset


async def strip_audio(asset: MediaAsset, output_path: Path) -> Path:
    """Write a copy of ``asset`` without audio to ``output_path``."""
    loop = asyncio.get_running_loop()
    try:
        return await loop.run_in_executor(None, ffutil.strip_audio, asset.path, output_path)
    except MediaProcessingError:
        output_path.unlink(missing_ok=True)
        raise

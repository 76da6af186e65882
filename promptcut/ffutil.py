"""FFmpeg/ffprobe subprocess helpers."""

import json
import logging
import shutil
import subprocess
from pathlib import Path

from promptcut.errors import FFmpegNotFoundError, MediaProcessingError
from promptcut.models import ProbeResult

logger = logging.getLogger(__name__)


def check_ffmpeg() -> None:
    """Raise FFmpegNotFoundError if ffmpeg/ffprobe are not on PATH."""
    for cmd in ("ffmpeg", "ffprobe"):
        if shutil.which(cmd) is None:
            raise FFmpegNotFoundError(f"{cmd} not found on PATH")


def _stderr_tail(e: subprocess.CalledProcessError) -> str:
    stderr = e.stderr if isinstance(e.stderr, str) else (e.stderr or b"").decode(errors="replace")
    return stderr.strip()[-500:]


def _run(cmd: list[str]) -> subprocess.CompletedProcess:
    logger.debug("Running %s", " ".join(cmd))
    try:
        return subprocess.run(cmd, capture_output=True, text=True, check=True)
    except subprocess.CalledProcessError as e:
        tail = _stderr_tail(e)
        raise MediaProcessingError(
            f"{cmd[0]} failed: {tail}" if tail else f"{cmd[0]} failed (rc={e.returncode})"
        ) from e
    except OSError as e:
        raise MediaProcessingError(f"Could not run {cmd[0]}: {e}") from e


def probe(input_path: Path) -> ProbeResult:
    """Extract media metadata via ffprobe."""
    cmd = [
        "ffprobe",
        "-v", "quiet",
        "-print_format", "json",
        "-show_format",
        "-show_streams",
        str(input_path),
    ]
    result = _run(cmd)
    try:
        data = json.loads(result.stdout)
    except json.JSONDecodeError as e:
        raise MediaProcessingError(f"Unreadable ffprobe output for {input_path}") from e

    streams = data.get("streams", [])
    video_stream = next((s for s in streams if s.get("codec_type") == "video"), None)
    audio_stream = next((s for s in streams if s.get("codec_type") == "audio"), None)

    if video_stream is None:
        raise MediaProcessingError(f"No video stream found in {input_path}")

    try:
        # Parse fps from r_frame_rate (e.g. "30/1")
        num, den = video_stream.get("r_frame_rate", "0/1").split("/")
        fps = int(num) / int(den) if int(den) else 0.0

        return ProbeResult(
            duration=float(data["format"]["duration"]),
            width=int(video_stream["width"]),
            height=int(video_stream["height"]),
            fps=fps,
            codec_video=video_stream["codec_name"],
            codec_audio=audio_stream["codec_name"] if audio_stream else None,
        )
    except (KeyError, ValueError) as e:
        raise MediaProcessingError(f"Incomplete metadata for {input_path}: {e}") from e


def trim(input_path: Path, start: float, end: float, output_path: Path) -> Path:
    """Write the ``[start, end)`` span of the input to a new file.

    ``-n`` makes ffmpeg fail rather than overwrite an existing output.
    """
    cmd = [
        "ffmpeg", "-n",
        "-ss", f"{start}",
        "-i", str(input_path),
        "-t", f"{end - start}",
        str(output_path),
    ]
    _run(cmd)
    return output_path


def strip_audio(input_path: Path, output_path: Path) -> Path:
    """Copy the input without its audio track."""
    cmd = [
        "ffmpeg", "-n",
        "-i", str(input_path),
        "-an",
        str(output_path),
    ]
    _run(cmd)
    return output_path

"""Shared data types used across PromptCut."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar, Union


@dataclass(frozen=True)
class TimeRange:
    """A start/end time pair in seconds."""

    start: float
    end: float


@dataclass(frozen=True)
class CutAction:
    """Keep only ``[start, end)`` of the input."""

    action: ClassVar[str] = "cut"

    start: float
    end: float


@dataclass(frozen=True)
class SplitAction:
    """Cut one part per range; part numbers follow the order of ``ranges``."""

    action: ClassVar[str] = "split"

    ranges: tuple[TimeRange, ...]


@dataclass(frozen=True)
class MuteAction:
    action: ClassVar[str] = "mute"


@dataclass(frozen=True)
class UnmuteAction:
    action: ClassVar[str] = "unmute"


ActionPlan = Union[CutAction, SplitAction, MuteAction, UnmuteAction]

ACTIONS: dict[str, type] = {
    cls.action: cls for cls in (CutAction, SplitAction, MuteAction, UnmuteAction)
}


@dataclass(frozen=True)
class MediaAsset:
    """An uploaded input file. Never written to."""

    path: Path

    @property
    def name(self) -> str:
        return self.path.name


@dataclass(frozen=True)
class Artifact:
    """A produced output file, addressed by its name for download."""

    name: str
    path: Path


@dataclass
class ExecutionResult:
    success: bool
    status_text: str
    artifacts: list[Artifact] = field(default_factory=list)

    @property
    def output_names(self) -> list[str]:
        return [a.name for a in self.artifacts]


@dataclass
class ProbeResult:
    """Metadata extracted from a media file via ffprobe."""

    duration: float
    width: int
    height: int
    fps: float
    codec_video: str
    codec_audio: str | None = None

    @property
    def has_audio(self) -> bool:
        return self.codec_audio is not None

"""Shared test fixtures."""

import subprocess
from pathlib import Path

import pytest

from promptcut.artifacts import ArtifactStore
from promptcut.config import Settings
from promptcut.models import MediaAsset


class FakeInstructions:
    """Stands in for the OpenAI client; always answers with ``answer``."""

    def __init__(self, answer: str):
        self.answer = answer
        self.prompts: list[str] = []

    async def interpret(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.answer


@pytest.fixture
def fake_instructions():
    return FakeInstructions


@pytest.fixture
def store(tmp_path: Path) -> ArtifactStore:
    return ArtifactStore(tmp_path / "output")


@pytest.fixture
def asset(tmp_path: Path) -> MediaAsset:
    path = tmp_path / "input.mp4"
    path.write_bytes(b"fake video data")
    return MediaAsset(path)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(upload_dir=tmp_path / "uploads", output_dir=tmp_path / "output")


@pytest.fixture(scope="session")
def synthetic_video(tmp_path_factory) -> Path:
    """A 20-second 320x240 clip with a 440 Hz tone."""
    out = tmp_path_factory.mktemp("media") / "synthetic.mp4"
    cmd = [
        "ffmpeg", "-y",
        "-f", "lavfi", "-i", "testsrc=size=320x240:rate=30:duration=20",
        "-f", "lavfi", "-i", "sine=frequency=440:duration=20",
        "-c:v", "mpeg4",
        "-c:a", "aac",
        "-shortest",
        str(out),
    ]
    subprocess.run(cmd, capture_output=True, check=True)
    return out

"""End-to-end scenarios against real ffmpeg on a synthetic 20-second clip."""

import asyncio
import shutil

import pytest

from promptcut import ffutil
from promptcut.engine import process_instruction
from promptcut.errors import MalformedResponseError, MediaProcessingError
from promptcut.models import MediaAsset

pytestmark = pytest.mark.skipif(
    shutil.which("ffmpeg") is None or shutil.which("ffprobe") is None,
    reason="ffmpeg/ffprobe not installed",
)

# Encoder frame/packet rounding.
TOLERANCE = 0.25


@pytest.fixture
def input_asset(synthetic_video, tmp_path):
    copy = tmp_path / "input.mp4"
    shutil.copy2(synthetic_video, copy)
    return MediaAsset(copy)


def _run(answer, asset, store, fake_instructions):
    return asyncio.run(process_instruction("prompt", asset, fake_instructions(answer), store))


def test_cut(input_asset, store, fake_instructions):
    result = _run('{"action": "cut", "start": 5, "end": 10}', input_asset, store, fake_instructions)

    assert "5" in result.status_text and "10" in result.status_text
    [artifact] = result.artifacts
    assert abs(ffutil.probe(artifact.path).duration - 5.0) < TOLERANCE


def test_split(input_asset, store, fake_instructions):
    result = _run(
        '{"action": "split", "start": [0, 10], "end": [10, 20]}', input_asset, store, fake_instructions
    )

    assert [a.name.split("_")[1] for a in result.artifacts] == ["1", "2"]
    for artifact in result.artifacts:
        assert abs(ffutil.probe(artifact.path).duration - 10.0) < TOLERANCE


def test_mute(input_asset, store, fake_instructions):
    result = _run('{"action": "mute"}', input_asset, store, fake_instructions)

    [artifact] = result.artifacts
    info = ffutil.probe(artifact.path)
    assert info.has_audio is False
    assert abs(info.duration - 20.0) < TOLERANCE
    assert ffutil.probe(input_asset.path).has_audio is True


def test_unmute(input_asset, store, fake_instructions):
    result = _run('{"action": "unmute"}', input_asset, store, fake_instructions)
    assert result.success is True
    assert result.artifacts == []
    assert result.status_text


def test_not_json(input_asset, store, fake_instructions):
    with pytest.raises(MalformedResponseError):
        _run("not json", input_asset, store, fake_instructions)
    assert not store.output_dir.exists()


def test_split_out_of_bounds_leaves_nothing(input_asset, store, fake_instructions):
    with pytest.raises(MediaProcessingError):
        _run(
            '{"action": "split", "start": [0, 15], "end": [5, 30]}',
            input_asset, store, fake_instructions,
        )
    assert list(store.output_dir.iterdir()) == []


def test_download_after_cut(input_asset, store, fake_instructions):
    result = _run('{"action": "cut", "start": 0, "end": 2}', input_asset, store, fake_instructions)
    [artifact] = result.artifacts
    size = artifact.path.stat().st_size

    assert len(store.retrieve(artifact.name).read()) == size
    assert not artifact.path.exists()

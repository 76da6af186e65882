"""Tests for the async trim and mute editors."""

import asyncio
from pathlib import Path
from unittest.mock import patch

import pytest

from promptcut.editors.cut import trim_range
from promptcut.editors.mute import strip_audio
from promptcut.errors import MediaProcessingError
from promptcut.models import ProbeResult


def _make_probe(duration: float = 20.0) -> ProbeResult:
    return ProbeResult(
        duration=duration,
        width=320,
        height=240,
        fps=30.0,
        codec_video="h264",
        codec_audio="aac",
    )


def _write_output(input_path, *args):
    output_path = args[-1]
    Path(output_path).write_bytes(b"out")
    return output_path


class TestTrimRange:
    @patch("promptcut.editors.cut.ffutil.trim", side_effect=_write_output)
    @patch("promptcut.editors.cut.ffutil.probe")
    def test_success(self, mock_probe, mock_trim, asset, tmp_path):
        mock_probe.return_value = _make_probe(20.0)
        out = tmp_path / "cut.mp4"

        result = asyncio.run(trim_range(asset, 5.0, 10.0, out))

        assert result == out
        mock_trim.assert_called_once_with(asset.path, 5.0, 10.0, out)

    @pytest.mark.parametrize("start,end", [(20.0, 20.0), (25.0, 30.0), (5.0, 21.0)])
    @patch("promptcut.editors.cut.ffutil.trim")
    @patch("promptcut.editors.cut.ffutil.probe")
    def test_out_of_bounds(self, mock_probe, mock_trim, start, end, asset, tmp_path):
        mock_probe.return_value = _make_probe(20.0)
        with pytest.raises(MediaProcessingError, match="outside the input duration"):
            asyncio.run(trim_range(asset, start, end, tmp_path / "cut.mp4"))
        mock_trim.assert_not_called()

    @patch("promptcut.editors.cut.ffutil.trim", side_effect=_write_output)
    @patch("promptcut.editors.cut.ffutil.probe")
    def test_end_within_tolerance(self, mock_probe, mock_trim, asset, tmp_path):
        mock_probe.return_value = _make_probe(19.98)
        asyncio.run(trim_range(asset, 10.0, 20.0, tmp_path / "cut.mp4"))
        mock_trim.assert_called_once()

    @patch("promptcut.editors.cut.ffutil.trim")
    @patch("promptcut.editors.cut.ffutil.probe")
    def test_partial_output_removed_on_failure(self, mock_probe, mock_trim, asset, tmp_path):
        out = tmp_path / "cut.mp4"

        def fail(*args):
            out.write_bytes(b"half")
            raise MediaProcessingError("ffmpeg failed: boom")

        mock_probe.return_value = _make_probe(20.0)
        mock_trim.side_effect = fail

        with pytest.raises(MediaProcessingError, match="boom"):
            asyncio.run(trim_range(asset, 0.0, 5.0, out))
        assert not out.exists()

    @patch("promptcut.editors.cut.ffutil.probe", side_effect=MediaProcessingError("unreadable"))
    def test_unreadable_input(self, mock_probe, asset, tmp_path):
        with pytest.raises(MediaProcessingError, match="unreadable"):
            asyncio.run(trim_range(asset, 0.0, 5.0, tmp_path / "cut.mp4"))


class TestStripAudio:
    @patch("promptcut.editors.mute.ffutil.strip_audio", side_effect=_write_output)
    def test_success(self, mock_strip, asset, tmp_path):
        out = tmp_path / "muted.mp4"
        assert asyncio.run(strip_audio(asset, out)) == out
        mock_strip.assert_called_once_with(asset.path, out)

    @patch("promptcut.editors.mute.ffutil.strip_audio")
    def test_failure_cleans_up(self, mock_strip, asset, tmp_path):
        out = tmp_path / "muted.mp4"

        def fail(*args):
            out.write_bytes(b"half")
            raise MediaProcessingError("ffmpeg failed")

        mock_strip.side_effect = fail
        with pytest.raises(MediaProcessingError):
            asyncio.run(strip_audio(asset, out))
        assert not out.exists()

import json
import os
import stat
import subprocess
import sys
import time

import pytest

from subcast.core.errors import ProbeError, TranscodeError
from subcast.features.media_transcoding.data import ffmpeg_adapter
from subcast.features.media_transcoding.data.ffmpeg_adapter import FFmpegTranscoder, escape_filter_path
from subcast.features.media_transcoding.data.process_runner import run_tool

PROBE_JSON = {
    "format": {"duration": "40.0", "bit_rate": "128000", "format_name": "mov,mp4", "size": "640000"},
    "streams": [
        {"codec_type": "video", "codec_name": "h264", "width": 1920, "height": 1080},
        {"codec_type": "audio", "codec_name": "aac"},
    ],
}


class FakeTools:
    """
    Stands in for run_tool: answers ffprobe with canned JSON and makes ffmpeg
    write a small output file. Records every command.
    """

    def __init__(self, probe=PROBE_JSON, ffmpeg_error=None, write_output=True):
        self.probe = probe
        self.ffmpeg_error = ffmpeg_error
        self.write_output = write_output
        self.calls = []

    def __call__(self, cmd, timeout, max_output_bytes, action):
        self.calls.append(cmd)
        if "ffprobe" in cmd[0]:
            if "csv=p=0" in cmd:
                return subprocess.CompletedProcess(cmd, 0, stdout=b"video\n", stderr=b"")
            return subprocess.CompletedProcess(cmd, 0, stdout=json.dumps(self.probe).encode(), stderr=b"")

        if self.write_output:
            with open(cmd[-1], "wb") as f:
                f.write(b"\x00" * 128)
        if self.ffmpeg_error:
            raise self.ffmpeg_error
        return subprocess.CompletedProcess(cmd, 0, stdout=b"", stderr=b"")

    def ffmpeg_calls(self):
        return [c for c in self.calls if "ffmpeg" in c[0] and "ffprobe" not in c[0]]


@pytest.fixture
def transcoder(scratch, test_settings):
    test_settings.FFMPEG_BINARY = "ffmpeg"
    test_settings.FFPROBE_BINARY = "ffprobe"
    return FFmpegTranscoder(scratch, test_settings)


@pytest.fixture
def source(tmp_path):
    path = tmp_path / "input.mp4"
    path.write_bytes(b"fake media")
    return path


def scratch_files(scratch):
    return list(scratch.root.iterdir()) if scratch.root.exists() else []


# --- Probing ---

def test_probe_parses_format_and_streams(transcoder, source, monkeypatch):
    monkeypatch.setattr(ffmpeg_adapter, "run_tool", FakeTools())

    info = transcoder.probe(source)

    assert info.duration == 40.0
    assert info.width == 1920 and info.height == 1080
    assert info.codec == "h264"
    assert info.bitrate == 128000
    assert info.container == "mov,mp4"
    assert info.size == 640000
    assert info.has_video and info.has_audio


def test_probe_audio_only_has_no_dimensions(transcoder, source, monkeypatch):
    probe = {"format": {"duration": "3.5"}, "streams": [{"codec_type": "audio", "codec_name": "mp3"}]}
    monkeypatch.setattr(ffmpeg_adapter, "run_tool", FakeTools(probe=probe))

    info = transcoder.probe(source)

    assert info.width is None and info.height is None
    assert info.codec == "mp3"
    assert not info.has_video
    assert info.container == "unknown"


def test_probe_tool_failure_is_probe_error(transcoder, source, monkeypatch):
    def failing(cmd, *args):
        raise TranscodeError("ffprobe failed with exit code 1", stderr="Invalid data")

    monkeypatch.setattr(ffmpeg_adapter, "run_tool", failing)

    with pytest.raises(ProbeError):
        transcoder.probe(source)


def test_probe_unparsable_output_is_probe_error(transcoder, source, monkeypatch):
    def garbage(cmd, *args):
        return subprocess.CompletedProcess(cmd, 0, stdout=b"not json", stderr=b"")

    monkeypatch.setattr(ffmpeg_adapter, "run_tool", garbage)

    with pytest.raises(ProbeError):
        transcoder.probe(source)


@pytest.mark.parametrize("stdout, expected", [
    (b"video\n", True),
    (b"video\nvideo\n", True),
    (b"", False),
])
def test_has_video_stream(transcoder, source, monkeypatch, stdout, expected):
    monkeypatch.setattr(ffmpeg_adapter, "run_tool",
                        lambda cmd, *a: subprocess.CompletedProcess(cmd, 0, stdout=stdout, stderr=b""))
    assert transcoder.has_video_stream(source) is expected


def test_has_video_stream_is_false_when_probe_fails(transcoder, source, monkeypatch):
    def failing(cmd, *args):
        raise TranscodeError("boom")

    monkeypatch.setattr(ffmpeg_adapter, "run_tool", failing)
    assert transcoder.has_video_stream(source) is False


# --- Conversions ---

def test_preview_uses_fixed_profile(transcoder, source, monkeypatch):
    tools = FakeTools()
    monkeypatch.setattr(ffmpeg_adapter, "run_tool", tools)

    result = transcoder.to_preview(source)

    cmd = tools.ffmpeg_calls()[0]
    assert cmd[cmd.index("-vf") + 1] == "scale=-2:480"
    assert cmd[cmd.index("-crf") + 1] == "28"
    assert cmd[cmd.index("-b:a") + 1] == "128k"
    assert cmd[cmd.index("-movflags") + 1] == "+faststart"
    assert result.output_path.name.endswith("-480p.mp4")
    assert result.size_bytes == 128
    assert result.duration_seconds == 40.0


def test_audio_is_mono_16k(transcoder, source, monkeypatch):
    tools = FakeTools()
    monkeypatch.setattr(ffmpeg_adapter, "run_tool", tools)

    result = transcoder.extract_audio(source)

    cmd = tools.ffmpeg_calls()[0]
    assert "-vn" in cmd
    assert cmd[cmd.index("-ac") + 1] == "1"
    assert cmd[cmd.index("-ar") + 1] == "16000"
    assert cmd[cmd.index("-b:a") + 1] == "64k"
    assert result.output_path.suffix == ".mp3"


def test_thumbnail_seeks_to_percent_of_duration(transcoder, source, monkeypatch):
    tools = FakeTools()
    monkeypatch.setattr(ffmpeg_adapter, "run_tool", tools)

    result = transcoder.extract_thumbnail(source, percent=25)

    cmd = tools.ffmpeg_calls()[0]
    assert float(cmd[cmd.index("-ss") + 1]) == 10.0
    assert cmd[cmd.index("-vframes") + 1] == "1"
    assert "min(720,iw)" in cmd[cmd.index("-vf") + 1]
    assert result.output_path.name.endswith("-thumb.jpg")


def test_failed_conversion_removes_partial_output(transcoder, scratch, source, monkeypatch):
    tools = FakeTools(ffmpeg_error=TranscodeError("Preview transcode failed with exit code 1"))
    monkeypatch.setattr(ffmpeg_adapter, "run_tool", tools)

    with pytest.raises(TranscodeError):
        transcoder.to_preview(source)

    assert scratch_files(scratch) == []


def test_empty_output_is_an_error(transcoder, scratch, source, monkeypatch):
    monkeypatch.setattr(ffmpeg_adapter, "run_tool", FakeTools(write_output=False))

    with pytest.raises(TranscodeError, match="no output"):
        transcoder.extract_audio(source)

    assert scratch_files(scratch) == []


def test_unreadable_output_is_transcode_error(transcoder, scratch, source, monkeypatch):
    tools = FakeTools(probe=None)
    monkeypatch.setattr(ffmpeg_adapter, "run_tool", tools)

    # json.dumps(None) == "null", which is not a probe object
    with pytest.raises(TranscodeError):
        transcoder.extract_audio(source)

    assert scratch_files(scratch) == []


# --- Burn-in ---

def test_burn_in_parameters(transcoder, source, tmp_path, monkeypatch):
    tools = FakeTools()
    monkeypatch.setattr(ffmpeg_adapter, "run_tool", tools)
    subs = tmp_path / "subs.ass"
    subs.write_text("[Script Info]")

    transcoder.burn_subtitles(source, subs, resolution="720p", quality="medium")

    cmd = tools.ffmpeg_calls()[0]
    vf = cmd[cmd.index("-vf") + 1]
    assert vf.startswith("scale=-2:720,subtitles='")
    assert cmd[cmd.index("-crf") + 1] == "20"
    assert cmd[cmd.index("-maxrate") + 1] == "8M"
    assert cmd[cmd.index("-b:a") + 1] == "256k"


def test_burn_in_4k_keeps_source_resolution(transcoder, source, tmp_path, monkeypatch):
    tools = FakeTools()
    monkeypatch.setattr(ffmpeg_adapter, "run_tool", tools)

    transcoder.burn_subtitles(source, tmp_path / "s.ass", resolution="4k", quality="high")

    cmd = tools.ffmpeg_calls()[0]
    assert cmd[cmd.index("-vf") + 1].startswith("subtitles=")
    assert cmd[cmd.index("-crf") + 1] == "16"
    assert cmd[cmd.index("-maxrate") + 1] == "68M"


def test_burn_in_rejects_unknown_resolution(transcoder, source, tmp_path):
    with pytest.raises(TranscodeError):
        transcoder.burn_subtitles(source, tmp_path / "s.ass", resolution="8k")


def test_escape_filter_path():
    assert escape_filter_path("/tmp/it's:x.ass") == "/tmp/it'\\''s\\:x.ass"
    assert escape_filter_path("C:\\subs\\a.ass") == "C\\:/subs/a.ass"


# --- Process runner ---

def test_run_tool_nonzero_exit_keeps_stderr():
    cmd = [sys.executable, "-c", "import sys; sys.stderr.write('bad input'); sys.exit(3)"]

    with pytest.raises(TranscodeError) as exc:
        run_tool(cmd, timeout=30, max_output_bytes=1024, action="Tool")

    assert "exit code 3" in str(exc.value)
    assert "bad input" in exc.value.stderr


def test_run_tool_bounds_captured_output():
    cmd = [sys.executable, "-c", "print('x' * 5000)"]

    with pytest.raises(TranscodeError, match="more than"):
        run_tool(cmd, timeout=30, max_output_bytes=100, action="Tool")


def test_run_tool_kills_a_tool_that_keeps_writing():
    # Never exits on its own: only the output cap can stop it before the timeout
    cmd = [sys.executable, "-c", "import sys\nwhile True:\n    sys.stdout.write('x' * 4096)\n    sys.stdout.flush()"]

    started = time.monotonic()
    with pytest.raises(TranscodeError, match="more than 10000 bytes"):
        run_tool(cmd, timeout=30, max_output_bytes=10000, action="Tool")

    assert time.monotonic() - started < 15


def test_run_tool_returns_captured_output():
    cmd = [sys.executable, "-c", "import sys; print('hello'); sys.stderr.write('note')"]

    result = run_tool(cmd, timeout=30, max_output_bytes=1024, action="Tool")

    assert result.returncode == 0
    assert result.stdout.strip() == b"hello"
    assert result.stderr == b"note"


def test_run_tool_missing_binary():
    with pytest.raises(TranscodeError, match="could not be started"):
        run_tool(["/nonexistent/ffmpeg-binary"], timeout=5, max_output_bytes=100, action="Tool")


@pytest.mark.skipif(os.name != "posix", reason="uses a shell script stand-in for ffmpeg")
def test_timeout_is_transcode_error_and_leaves_no_temp_files(scratch, test_settings, source, tmp_path):
    # Writes a partial output file, then hangs
    fake = tmp_path / "fake-ffmpeg"
    fake.write_text('#!/bin/sh\nfor last; do :; done\n: > "$last"\nexec sleep 5\n')
    fake.chmod(fake.stat().st_mode | stat.S_IEXEC)

    test_settings.FFMPEG_BINARY = str(fake)
    test_settings.CODEC_TIMEOUT_SECONDS = 0.5
    transcoder = FFmpegTranscoder(scratch, test_settings)

    started = time.monotonic()
    with pytest.raises(TranscodeError, match="timed out"):
        transcoder.to_preview(source)

    assert time.monotonic() - started < 4
    assert scratch_files(scratch) == []

import pytest

from subcast.core.common.enums import MediaType
from subcast.core.errors import ValidationError
from subcast.features.media_processing.domain.media_types import (
    MAX_FILE_SIZE_BYTES,
    is_allowed_mime_type,
    is_audio_type,
    is_video_type,
    validate_upload,
)


@pytest.mark.parametrize("mime, audio, video", [
    ("audio/mpeg", True, False),
    ("audio/flac", True, False),
    ("video/mp4", False, True),
    ("video/x-matroska", False, True),
    ("image/png", False, False),
])
def test_mime_classification(mime, audio, video):
    assert is_audio_type(mime) is audio
    assert is_video_type(mime) is video
    assert is_allowed_mime_type(mime) is (audio or video)


def test_validate_upload_returns_media_type():
    assert validate_upload("video/webm", 10) == MediaType.VIDEO
    assert validate_upload("audio/wav") == MediaType.AUDIO


def test_validate_upload_limits():
    with pytest.raises(ValidationError, match="Unsupported"):
        validate_upload("text/plain", 10)
    with pytest.raises(ValidationError, match="too large"):
        validate_upload("video/mp4", MAX_FILE_SIZE_BYTES + 1)
    with pytest.raises(ValidationError, match="empty"):
        validate_upload("audio/mpeg", 0)

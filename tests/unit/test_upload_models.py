"""Tests for upload models."""
import pytest

from youtubeup.core.api import NetworkErrorKind
from youtubeup.core.exceptions import ProtocolError, UploadFailedError
from youtubeup.core.upload import (
    FatalFailure,
    ProbeOffset,
    UploadProgress,
    UploadResult,
    UploadState,
    VideoMetadata
)
from youtubeup.core.upload.models import PRIVACY_STATUSES, TransientFailure


class TestVideoMetadata:
    """Tests for VideoMetadata."""

    def test_minimal_payload(self):
        """Test empty optional fields are left out."""
        assert VideoMetadata(title="Talk").to_dict() == {
            'snippet': {'title': 'Talk'},
            'status': {'privacyStatus': 'public'},
        }

    def test_full_payload(self):
        metadata = VideoMetadata(
            title="Talk",
            description="About things",
            tags=["a", "b"],
            privacy_status="private",
            category_id=28,
            embeddable=False,
            license="creativeCommon"
        )

        assert metadata.to_dict() == {
            'snippet': {
                'title': 'Talk',
                'description': 'About things',
                'tags': ['a', 'b'],
                'categoryId': '28',
            },
            'status': {
                'privacyStatus': 'private',
                'embeddable': False,
                'license': 'creativeCommon',
            },
        }

    def test_invalid_privacy(self):
        with pytest.raises(ValueError):
            VideoMetadata(title="Talk", privacy_status="secret")

    def test_privacy_statuses(self):
        assert PRIVACY_STATUSES == ('public', 'unlisted', 'private')


class TestUploadProgress:
    """Tests for UploadProgress."""

    def test_percentage(self):
        assert UploadProgress(250, 1000).percentage == 25.0

    def test_percentage_zero_total(self):
        assert UploadProgress(0, 0).percentage == 0.0

    def test_is_complete(self):
        assert UploadProgress(1000, 1000).is_complete
        assert not UploadProgress(999, 1000).is_complete


class TestProbeOffset:
    """Tests for ProbeOffset."""

    def test_next_byte(self):
        """Test the next byte follows the last stored one."""
        assert ProbeOffset(499).next_byte == 500
        assert ProbeOffset(0).next_byte == 1


class TestUploadState:
    """Tests for UploadState."""

    @pytest.mark.parametrize('state,terminal', [
        (UploadState.IDLE, False),
        (UploadState.PROBING, False),
        (UploadState.TRANSFERRING, False),
        (UploadState.RETRYING, False),
        (UploadState.SUCCEEDED, True),
        (UploadState.FAILED, True),
    ])
    def test_is_terminal(self, state, terminal):
        assert state.is_terminal is terminal


class TestUploadResult:
    """Tests for UploadResult."""

    def test_video_id(self):
        result = UploadResult(UploadState.SUCCEEDED, resource={'id': 'vid123'})

        assert result.video_id == 'vid123'
        assert not result.already_complete

    def test_already_complete(self):
        """Test a result without resource means completion was observed by probe."""
        result = UploadResult(UploadState.SUCCEEDED)

        assert result.already_complete
        assert result.video_id is None


class TestUploadFailedError:
    """Tests for UploadFailedError."""

    def test_carries_status_and_body(self):
        """Test HTTP details are lifted from the final outcome."""
        outcome = FatalFailure(ProtocolError.from_response('Upload', 403, 'quotaExceeded'))

        error = UploadFailedError("Upload failed", outcome=outcome, state=UploadState.TRANSFERRING)

        assert error.status == 403
        assert error.body == 'quotaExceeded'
        assert error.state is UploadState.TRANSFERRING

    def test_network_outcome_has_no_status(self):
        outcome = TransientFailure(NetworkErrorKind.CONNECT, OSError("refused"))

        error = UploadFailedError("Upload failed", outcome=outcome)

        assert error.status is None
        assert error.outcome is outcome

    def test_protocol_error_message(self):
        error = ProtocolError.from_response('Upload', 500, '')

        assert str(error) == "Upload failed with HTTP 500: <empty body>"

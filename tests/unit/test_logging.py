"""Tests for logging helpers."""
import logging

from youtubeup import setup_logging
from youtubeup.core.logging import get_logger


class TestGetLogger:
    """Test suite for get_logger."""

    def test_returns_named_logger(self):
        logger = get_logger('youtubeup.test')

        assert logger.name == 'youtubeup.test'
        assert logger.propagate

    def test_same_logger_for_same_name(self):
        assert get_logger('youtubeup.same') is get_logger('youtubeup.same')

    def test_short_name_nested_under_package(self):
        """Test names outside the package land under youtubeup."""
        assert get_logger('session') is get_logger('youtubeup.session')
        assert get_logger('youtubeup').name == 'youtubeup'
        assert get_logger('youtubeupx').name == 'youtubeup.youtubeupx'

    def test_explicit_level_is_kept(self):
        """Test a level set by setup_logging is not reset to WARNING."""
        setup_logging(logging.DEBUG)

        assert get_logger('youtubeup.upload.probe').level == logging.DEBUG
        setup_logging(logging.INFO)


class TestSetupLogging:
    """Test suite for setup_logging."""

    def test_sets_level_on_module_loggers(self):
        """Test every youtubeup logger gets the requested level."""
        setup_logging(logging.DEBUG)

        for name in ('youtubeup', 'youtubeup.upload.coordinator', 'youtubeup.upload.probe'):
            assert logging.getLogger(name).level == logging.DEBUG

        setup_logging(logging.INFO)
        assert logging.getLogger('youtubeup.session').level == logging.INFO

    def test_coordinator_logs_state_changes(self, caplog):
        """Test state transitions are logged at debug level."""
        from youtubeup.core.upload import UploadCoordinator, UploadState

        setup_logging(logging.DEBUG)
        coordinator = UploadCoordinator(transport=None)

        with caplog.at_level(logging.DEBUG, logger='youtubeup.upload.coordinator'):
            coordinator._set_state(UploadState.PROBING)

        assert "State idle -> probing" in caplog.text
        setup_logging(logging.INFO)

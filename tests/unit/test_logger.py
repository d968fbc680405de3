"""
Unit tests for logging helpers.
"""
import logging
import pytest

from kidskills.utils.logger import get_logger, mask_secret


class TestLogger:
    """Test cases for logging helpers."""

    @pytest.mark.unit
    def test_get_logger_adds_single_handler(self):
        logger = get_logger("kidskills.test.single", level="DEBUG")
        get_logger("kidskills.test.single")
        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG

    @pytest.mark.unit
    @pytest.mark.parametrize("secret,expected", [
        (None, "<none>"),
        ("", "<none>"),
        ("short", "<5 chars>"),
        ("sk-or-1234567890", "...7890 (16 chars)"),
    ])
    def test_mask_secret(self, secret, expected):
        """Credentials are never logged in full."""
        assert mask_secret(secret) == expected

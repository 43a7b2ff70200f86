"""Tests for i18n (internationalization) module."""

import pytest

from textcut.utils.i18n import current_language, init_language, tr


@pytest.fixture(autouse=True)
def _restore_english():
    yield
    init_language("en")


class TestI18n:
    """Test the tr() translation function."""

    def test_tr_returns_key_for_english(self):
        init_language("en")
        assert tr("Start Recognition") == "Start Recognition"

    def test_tr_returns_korean(self):
        init_language("ko")
        assert tr("Start Recognition") == "음성 인식 시작"
        assert tr("No speech") == "음성 없음"

    def test_tr_fallback_for_missing_key(self):
        init_language("ko")
        assert tr("nonexistent_key_xyz_12345") == "nonexistent_key_xyz_12345"

    def test_unknown_language_falls_back(self):
        init_language("xx")
        assert tr("Abort") == "Abort"
        assert current_language() == "en"

    def test_fields_are_filled(self):
        init_language("ko")
        assert tr("Starting speech recognition on {name}.", name="a.mp4") == "a.mp4 클립의 음성 인식을 시작합니다."
        init_language("en")
        assert tr("Starting speech recognition on {name}.", name="a.mp4") == "Starting speech recognition on a.mp4."

    def test_no_fields_keeps_braces(self):
        assert tr("{not a field}") == "{not a field}"

    def test_ko_coverage_recognition_messages(self):
        """Verify banner messages have Korean translations."""
        init_language("ko")
        for key in (
            "Speech recognition finished.",
            "Speech recognition aborted.",
            "No speech detected.",
            "Please install speech recognition models",
            "No text to export",
        ):
            assert tr(key) != key

    def test_reinit_switches_language(self):
        init_language("ko")
        assert tr("Abort") == "중단"
        init_language("en")
        assert tr("Abort") == "Abort"

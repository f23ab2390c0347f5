"""Tests for Settings validation."""

import pytest
from pydantic import ValidationError


class TestSettingsDefaults:
    def test_settings_fixture_overrides(self, settings):
        assert settings.chapter_min_chars == 20
        assert settings.retry_base_delay == 0.0

    def test_default_values(self, tmp_path):
        from config.settings import Settings
        # Use _env_file=None to test code defaults without .env overrides
        s = Settings(_env_file=None, export_dir=tmp_path / "exports", log_dir=tmp_path / "logs")
        assert s.retry_max_attempts == 3
        assert s.retry_base_delay == 1.0
        assert s.min_chapters == 8
        assert s.max_chapters == 12
        assert s.cover_aspect_ratio == "3:4"
        assert s.book_language == "en"

    def test_default_model_names(self, tmp_path):
        from config.settings import Settings
        s = Settings(_env_file=None, export_dir=tmp_path / "exports", log_dir=tmp_path / "logs")
        assert s.llm_model_text == "gemini-2.5-flash"
        assert s.llm_model_image == "gemini-2.5-flash-image"

    def test_google_api_key_alias(self, tmp_path, monkeypatch):
        from config.settings import Settings
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        monkeypatch.setenv("GOOGLE_API_KEY", "g-key")
        s = Settings(_env_file=None, export_dir=tmp_path / "exports", log_dir=tmp_path / "logs")
        assert s.gemini_api_key == "g-key"

    def test_provider_from_env(self, tmp_path, monkeypatch):
        from config.settings import Settings
        monkeypatch.setenv("PROVIDER", "claude")
        s = Settings(_env_file=None, export_dir=tmp_path / "exports", log_dir=tmp_path / "logs")
        assert s.provider == "claude"


class TestSettingsValidation:
    def _make(self, tmp_path, **kwargs):
        from config.settings import Settings
        return Settings(_env_file=None, export_dir=tmp_path / "exports", log_dir=tmp_path / "logs", **kwargs)

    def test_min_chapters_above_max_raises(self, tmp_path):
        with pytest.raises(ValidationError, match="min_chapters"):
            self._make(tmp_path, min_chapters=10, max_chapters=5)

    def test_max_attempts_zero_raises(self, tmp_path):
        with pytest.raises(ValidationError, match="retry_max_attempts"):
            self._make(tmp_path, retry_max_attempts=0)

    def test_negative_base_delay_raises(self, tmp_path):
        with pytest.raises(ValidationError, match="retry_base_delay"):
            self._make(tmp_path, retry_base_delay=-1)

    def test_zero_chapter_count_raises(self, tmp_path):
        with pytest.raises(ValidationError, match="Chapter count"):
            self._make(tmp_path, min_chapters=0)

    def test_unknown_provider_raises(self, tmp_path):
        with pytest.raises(ValidationError):
            self._make(tmp_path, provider="openai")

    def test_parent_dirs_created(self, tmp_path):
        s = self._make(tmp_path / "nested")
        assert s.export_dir.parent.exists()

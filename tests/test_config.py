"""
Tests for overlay_translator.config and the event log.
"""
import re

from overlay_translator.config import EngineConfig, Settings, SettingsStore
from overlay_translator.utils.logger import EventLog


class TestEngineConfig:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        config = EngineConfig()
        assert config.scale == 1.5
        assert config.target_lang == "es"
        assert config.provider == "free"
        assert config.api_key is None

    def test_api_key_from_environment(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        assert EngineConfig(provider="openai").api_key == "sk-env"
        assert EngineConfig(provider="openai", api_key="sk-arg").api_key == "sk-arg"

    def test_environment_key_beats_stored_key(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "AIza-env")
        config = EngineConfig()
        config.apply_settings(Settings(api_key="AIza-stored", provider="gemini", target_lang="fr"))
        assert config.api_key == "AIza-env"
        assert config.target_lang == "fr"


class TestSettingsStore:
    def test_round_trip(self, tmp_path):
        store = SettingsStore(tmp_path / "nested" / "settings.json")
        store.save(Settings(api_key="k", provider="google", target_lang="de", ocr=True))
        assert store.load() == Settings(api_key="k", provider="google", target_lang="de", ocr=True)

    def test_missing_file_gives_defaults(self, tmp_path):
        assert SettingsStore(tmp_path / "none.json").load() == Settings()

    def test_corrupt_file_gives_defaults(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("{not json", encoding="utf-8")
        assert SettingsStore(path).load() == Settings()

    def test_unknown_keys_are_ignored(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text('{"provider": "openai", "theme": "dark"}', encoding="utf-8")
        assert SettingsStore(path).load().provider == "openai"


class TestEventLog:
    def test_entries_are_timestamped(self):
        log = EventLog()
        log.info("started")
        assert re.fullmatch(r"\[\d{2}:\d{2}:\d{2}\] started", log.logs[0])

    def test_levels_and_callback(self):
        seen = []
        log = EventLog(callback=seen.append)
        log.warning("slow")
        log.error("broken")

        assert len(log) == 2
        assert seen == log.logs
        assert "WARN: slow" in log.get_all()
        assert "ERROR: broken" in log.get_all()

        log.clear()
        assert log.get_all() == ""

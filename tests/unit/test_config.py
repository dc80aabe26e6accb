"""Tests for settings defaults and normalisation."""

from matka.config import Settings


class TestSettings:
    def test_defaults(self):
        s = Settings()
        assert s.admin_token_ttl_hours == 24
        assert s.admin_password_min_length == 6
        assert s.results_previous_limit == 120
        assert s.results_recent_days == 9
        assert s.push_send_requires_admin is False

    def test_vapid_email_gets_mailto(self):
        assert Settings(vapid_email="ops@example.com").vapid_email == "mailto:ops@example.com"

    def test_vapid_mailto_kept(self):
        assert Settings(vapid_email="mailto:ops@example.com").vapid_email == "mailto:ops@example.com"

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("MATKA_PORT", "8080")
        monkeypatch.setenv("MATKA_PUSH_SEND_REQUIRES_ADMIN", "true")
        s = Settings()
        assert s.port == 8080
        assert s.push_send_requires_admin is True

"""Unit tests for status labels, badge counts, sessions and configuration"""

import pytest
from datetime import datetime, timedelta, timezone
from circulation_desk.config import Settings, get_api_url
from circulation_desk.domain.models import BookStatus, NotificationSummary, badge_count, badge_label
from circulation_desk.infrastructure.auth.session import StaticSessionProvider, Token


NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "status,label",
    [
        (BookStatus.AVAILABLE, "Available"),
        (BookStatus.CHECKED_OUT, "On Loan"),
        (BookStatus.RESERVED, "Reserved"),
        (BookStatus.MAINTENANCE, "Maintenance"),
    ],
)
def test_badge_label_covers_every_status(status: BookStatus, label: str):
    assert badge_label(status) == label


def test_unknown_status_value_is_rejected():
    with pytest.raises(ValueError):
        BookStatus("lost")


def test_badge_count_sums_overdue_and_due_soon():
    summary = NotificationSummary(total_checkouts=5, overdue_count=1, due_soon_count=2)

    assert summary.has_notifications is True
    assert badge_count(summary) == 3


def test_badge_count_is_zero_without_notifications():
    quiet = NotificationSummary(total_checkouts=4, overdue_count=0, due_soon_count=0)

    assert quiet.has_notifications is False
    assert badge_count(quiet) == 0
    assert badge_count(None) == 0


def test_session_provider_returns_live_token():
    token = Token("abc", expires_at=NOW + timedelta(minutes=5))
    provider = StaticSessionProvider(token, clock=lambda: NOW)

    assert provider.get_active_token() == token


def test_session_provider_hides_expired_token():
    provider = StaticSessionProvider(Token("abc", expires_at=NOW - timedelta(seconds=1)), clock=lambda: NOW)

    assert provider.get_active_token() is None


def test_sign_out_clears_token():
    provider = StaticSessionProvider(Token("abc"), clock=lambda: NOW)
    provider.sign_out()

    assert provider.get_active_token() is None


def test_api_url_production_fallback():
    config = Settings(environment="production", api_url=None)
    assert get_api_url(config) == "https://backend-theta-dusky-43.vercel.app"


def test_api_url_prefers_configured_url():
    config = Settings(environment="production", api_url="https://catalog.example.org")
    assert get_api_url(config) == "https://catalog.example.org"


def test_api_url_development_uses_proxy():
    config = Settings(environment="development", api_url=None)
    assert get_api_url(config) == "http://localhost:3000/api"

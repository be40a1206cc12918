"""Session provider capability - supplies the active bearer token"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Protocol
from circulation_desk.utils.date_utils import ensure_utc, utc_now


@dataclass(frozen=True)
class Token:
    """Bearer credential issued by the auth provider"""

    access_token: str
    expires_at: datetime | None = None

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and ensure_utc(self.expires_at) <= ensure_utc(now)


class SessionProvider(Protocol):
    """Read-only view of the current session"""

    def get_active_token(self) -> Token | None:
        ...


class StaticSessionProvider:
    """Holds a token set by the embedding application; expired tokens read as absent"""

    def __init__(self, token: Token | None = None, clock: Callable[[], datetime] = utc_now):
        self._token = token
        self._clock = clock

    def set_token(self, token: Token | None) -> None:
        self._token = token

    def sign_out(self) -> None:
        self._token = None

    def get_active_token(self) -> Token | None:
        if self._token is None or self._token.is_expired(self._clock()):
            return None
        return self._token

from dataclasses import dataclass
from datetime import datetime, timedelta


@dataclass(frozen=True)
class AccessToken:
    """Short-lived bearer token issued by the credential provider."""

    token: str
    expires_at: datetime

    def is_fresh(self, now: datetime, margin: timedelta) -> bool:
        """True while the token stays valid for at least *margin* longer."""
        return now + margin < self.expires_at

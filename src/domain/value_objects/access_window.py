"""Validity window for signed read URLs."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from pydantic import BaseModel, ConfigDict, model_validator

DEFAULT_LEAD = timedelta(minutes=100)
DEFAULT_TTL = timedelta(minutes=100)


class AccessWindow(BaseModel):
    """Time range during which a signed URL grants read access.

    The window opens before the moment of generation to tolerate clock skew
    between this service, the provider and the caller.
    """

    starts_on: datetime
    expires_on: datetime

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def check_order(self) -> AccessWindow:
        """Ensure the window is not empty."""
        if self.expires_on <= self.starts_on:
            msg = "expires_on must be later than starts_on"
            raise ValueError(msg)
        return self

    @classmethod
    def around(
        cls,
        moment: datetime | None = None,
        *,
        lead: timedelta = DEFAULT_LEAD,
        ttl: timedelta = DEFAULT_TTL,
    ) -> AccessWindow:
        """Build a window starting ``lead`` before and ending ``ttl`` after ``moment``.

        Args:
            moment: Reference time. Defaults to now (UTC).
            lead: How far before ``moment`` the window opens.
            ttl: How far after ``moment`` the window closes.

        Returns:
            The access window.
        """
        now = moment or datetime.now(UTC)
        return cls(starts_on=now - lead, expires_on=now + ttl)

    @property
    def duration(self) -> timedelta:
        """Total length of the window."""
        return self.expires_on - self.starts_on

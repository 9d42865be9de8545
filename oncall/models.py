"""Value types for rotation configs, overrides and shifts."""

from datetime import datetime, timedelta, timezone
import pydantic


TIMESTAMP_FORMAT = '%Y-%m-%dT%H:%M:%SZ'


def as_utc(value: datetime) -> datetime:
    """Normalize an instant to UTC; naive datetimes are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_timestamp(value: datetime) -> str:
    # strftime drops the microseconds, which is the truncation we want
    return as_utc(value).strftime(TIMESTAMP_FORMAT)


class Schedule(pydantic.BaseModel):
    users: list[str]
    handover_start_at: datetime
    handover_interval_days: pydantic.FiniteFloat

    @pydantic.field_validator('handover_interval_days')
    @classmethod
    def validate_handover_interval(cls, v: float) -> float:
        if v <= 0:
            raise ValueError('handover_interval_days must be greater than 0')
        if v > timedelta.max.days:
            raise ValueError(f'handover_interval_days must be at most {timedelta.max.days}')
        # values below a microsecond round to a zero-length interval
        if timedelta(days=v) <= timedelta(0):
            raise ValueError('handover_interval_days must be greater than 0')
        return v

    @pydantic.field_validator('users')
    @classmethod
    def validate_users(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError('users list cannot be empty')
        return v

    @pydantic.field_validator('handover_start_at')
    @classmethod
    def normalize_anchor(cls, v: datetime) -> datetime:
        return as_utc(v)

    @property
    def handover_interval(self) -> timedelta:
        return timedelta(days=self.handover_interval_days)


class Override(pydantic.BaseModel):
    user: str
    start_at: datetime
    end_at: datetime

    @pydantic.field_validator('start_at', 'end_at')
    @classmethod
    def normalize_instant(cls, v: datetime) -> datetime:
        return as_utc(v)

    @pydantic.model_validator(mode='after')
    def validate_time_order(self) -> 'Override':
        if self.end_at <= self.start_at:
            raise ValueError('end_at must be after start_at')
        return self


class Shift(pydantic.BaseModel):
    """
    One user on call for the half-open interval [start_at, end_at).

    Timestamps keep full precision; they are only truncated to whole
    seconds when dumped in JSON mode.
    """

    model_config = pydantic.ConfigDict(frozen=True)

    user: str
    start_at: datetime
    end_at: datetime

    @pydantic.field_serializer('start_at', 'end_at', when_used='json')
    def serialize_instant(self, v: datetime) -> str:
        return format_timestamp(v)

    def overlaps(self, start_at: datetime, end_at: datetime) -> bool:
        return start_at < self.end_at and end_at > self.start_at

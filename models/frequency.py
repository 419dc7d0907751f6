from dataclasses import dataclass
from enum import Enum

from utils.errors import MalformedCustomPeriod


class FrequencyKind(str, Enum):
    ONE_TIME = "one_time"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    CUSTOM = "custom"


# Labels the entry forms have always shown (and older data stored).
FREQUENCY_LABELS = {
    FrequencyKind.ONE_TIME: "One-time",
    FrequencyKind.DAILY: "Every day",
    FrequencyKind.WEEKLY: "Every week",
    FrequencyKind.MONTHLY: "Every month",
    FrequencyKind.YEARLY: "Every year",
    FrequencyKind.CUSTOM: "Other",
}

# Calendar unit a fixed frequency advances by.
FIXED_UNITS = {
    FrequencyKind.DAILY: "day",
    FrequencyKind.WEEKLY: "week",
    FrequencyKind.MONTHLY: "month",
    FrequencyKind.YEARLY: "year",
}


@dataclass(frozen=True)
class Frequency:
    kind: FrequencyKind
    years: int = 0      # only meaningful for CUSTOM
    months: int = 0
    days: int = 0

    def __post_init__(self):
        if self.kind is FrequencyKind.CUSTOM:
            if min(self.years, self.months, self.days) < 0:
                raise MalformedCustomPeriod("Custom period offsets cannot be negative.")
            if not (self.years or self.months or self.days):
                raise MalformedCustomPeriod("Custom period needs at least one non-zero offset.")
        elif self.years or self.months or self.days:
            raise ValueError(f"Offsets are only allowed on custom frequencies, not {self.kind.value}.")

    @classmethod
    def one_time(cls) -> "Frequency":
        return cls(FrequencyKind.ONE_TIME)

    @classmethod
    def daily(cls) -> "Frequency":
        return cls(FrequencyKind.DAILY)

    @classmethod
    def weekly(cls) -> "Frequency":
        return cls(FrequencyKind.WEEKLY)

    @classmethod
    def monthly(cls) -> "Frequency":
        return cls(FrequencyKind.MONTHLY)

    @classmethod
    def yearly(cls) -> "Frequency":
        return cls(FrequencyKind.YEARLY)

    @classmethod
    def custom(cls, years: int = 0, months: int = 0, days: int = 0) -> "Frequency":
        return cls(FrequencyKind.CUSTOM, years=years, months=months, days=days)

    @classmethod
    def from_label(cls, label: str, years: int = 0, months: int = 0, days: int = 0) -> "Frequency":
        """Build from a form label such as 'Every week' or 'Other'."""
        for kind, kind_label in FREQUENCY_LABELS.items():
            if kind_label == label:
                if kind is FrequencyKind.CUSTOM:
                    return cls.custom(years=years, months=months, days=days)
                return cls(kind)
        raise ValueError(f"Invalid frequency: {label}")

    @property
    def is_recurring(self) -> bool:
        return self.kind is not FrequencyKind.ONE_TIME

    @property
    def label(self) -> str:
        return FREQUENCY_LABELS[self.kind]

    def describe(self) -> str:
        """Human description, e.g. 'Every 1 month, 15 days'."""
        if self.kind is not FrequencyKind.CUSTOM:
            return self.label
        parts = []
        for count, unit in ((self.years, "year"), (self.months, "month"), (self.days, "day")):
            if count:
                parts.append(f"{count} {unit}{'s' if count != 1 else ''}")
        return "Every " + ", ".join(parts)

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "years": self.years,
            "months": self.months,
            "days": self.days,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Frequency":
        kind = FrequencyKind(data["kind"])
        if kind is FrequencyKind.CUSTOM:
            return cls.custom(
                years=int(data.get("years") or 0),
                months=int(data.get("months") or 0),
                days=int(data.get("days") or 0),
            )
        return cls(kind)

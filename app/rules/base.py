from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from types import MappingProxyType


class Regime(str, Enum):
    OLD = "Old"
    NEW = "New"

    @classmethod
    def parse(cls, value: "str | Regime") -> "Regime":
        if isinstance(value, Regime):
            return value
        normalized = str(value).strip().lower()
        for regime in cls:
            if regime.value.lower() == normalized:
                return regime
        raise ValueError(f"Unsupported tax regime '{value}'. Use 'Old' or 'New'.")


class AgeBand(str, Enum):
    GENERAL = "general"
    SENIOR = "senior"
    SUPER_SENIOR = "superSenior"

    @classmethod
    def for_age(cls, age: int) -> "AgeBand":
        if age >= 80:
            return cls.SUPER_SENIOR
        if age >= 60:
            return cls.SENIOR
        return cls.GENERAL


@dataclass(frozen=True)
class TaxSlab:
    upper_bound: Decimal | None
    rate: Decimal


@dataclass(frozen=True)
class RebateRule:
    income_limit: Decimal
    max_rebate: Decimal

    def __post_init__(self) -> None:
        if self.income_limit < 0 or self.max_rebate < 0:
            raise ValueError("rebate income limit and max rebate must be non-negative")


def slabs(*pairs: tuple[int | None, str]) -> tuple[TaxSlab, ...]:
    """Build a slab tuple from ``(upper_bound, rate)`` pairs; ``None`` marks the open top slab."""
    return tuple(
        TaxSlab(
            upper_bound=Decimal(str(bound)) if bound is not None else None,
            rate=Decimal(rate),
        )
        for bound, rate in pairs
    )


def _validate_slabs(label: str, schedule: tuple[TaxSlab, ...]) -> None:
    if not schedule:
        raise ValueError(f"{label} has no slabs")
    previous = Decimal("0")
    for idx, slab in enumerate(schedule):
        if not (Decimal("0") <= slab.rate <= Decimal("1")):
            raise ValueError(f"{label}[{idx}] rate must be within [0, 1]")
        is_last = idx == len(schedule) - 1
        if slab.upper_bound is None:
            if not is_last:
                raise ValueError(f"{label}[{idx}] only the last slab may be unbounded")
            continue
        if is_last:
            raise ValueError(f"{label}[{idx}] last slab must be unbounded")
        if slab.upper_bound <= previous:
            raise ValueError(f"{label}[{idx}] bounds must be strictly increasing")
        previous = slab.upper_bound


@dataclass(frozen=True)
class TaxYearRule:
    assessment_year: str
    regime: Regime
    general: tuple[TaxSlab, ...]
    rebate: RebateRule
    cess_rate: Decimal = Decimal("0.04")
    senior: tuple[TaxSlab, ...] | None = None
    super_senior: tuple[TaxSlab, ...] | None = None
    bands: MappingProxyType = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.regime is Regime.NEW and (self.senior or self.super_senior):
            raise ValueError(f"{self.key}: age-band slabs only exist for the Old regime")
        if not (Decimal("0") <= self.cess_rate <= Decimal("1")):
            raise ValueError(f"{self.key}: cess rate must be within [0, 1]")

        bands = {AgeBand.GENERAL: self.general}
        if self.senior:
            bands[AgeBand.SENIOR] = self.senior
        if self.super_senior:
            bands[AgeBand.SUPER_SENIOR] = self.super_senior
        for band, schedule in bands.items():
            _validate_slabs(f"{self.key}.{band.value}", schedule)
        object.__setattr__(self, "bands", MappingProxyType(bands))

    @property
    def key(self) -> str:
        return rule_key(self.assessment_year, self.regime)

    def select(self, age: int, regime: Regime | None = None) -> tuple[AgeBand, tuple[TaxSlab, ...]]:
        """Pick the slab schedule for ``age``; the New regime always uses the general band.

        ``regime`` overrides the rule's own regime when a fallback table stands in for another.
        """
        if (regime or self.regime) is Regime.NEW:
            return AgeBand.GENERAL, self.general

        band = AgeBand.for_age(age)
        if band is AgeBand.SUPER_SENIOR and band not in self.bands:
            band = AgeBand.SENIOR
        if band is AgeBand.SENIOR and band not in self.bands:
            band = AgeBand.GENERAL
        return band, self.bands[band]


def rule_key(assessment_year: str, regime: "Regime | str") -> str:
    regime = Regime.parse(regime)
    if regime is Regime.NEW:
        return f"{assessment_year}-new"
    return assessment_year

from types import MappingProxyType
from typing import Iterable

from app.rules import ay2023_24, ay2024_25
from app.rules.base import Regime, TaxYearRule, rule_key


# Published years are appended here; an existing year's module is never edited.
PUBLISHED_RULES: tuple[TaxYearRule, ...] = (*ay2023_24.RULES, *ay2024_25.RULES)

FALLBACK_RULE: TaxYearRule = ay2024_25.OLD_REGIME


class RuleTable:
    def __init__(
        self,
        rules: Iterable[TaxYearRule] = PUBLISHED_RULES,
        fallback: TaxYearRule = FALLBACK_RULE,
    ) -> None:
        table: dict[str, TaxYearRule] = {}
        for rule in rules:
            if rule.key in table:
                raise ValueError(f"Duplicate tax rule for '{rule.key}'")
            table[rule.key] = rule
        self._rules = MappingProxyType(table)
        self.fallback = fallback

    def lookup(self, assessment_year: str, regime: Regime | str) -> TaxYearRule | None:
        return self._rules.get(rule_key(assessment_year, regime))

    def available(self) -> list[str]:
        return sorted(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

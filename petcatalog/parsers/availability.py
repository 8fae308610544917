"""
Availability-State Parser.

Reads per-value availability from a twister snapshot taken after one option
combination was selected on the live page, and applies it to the candidate
variant combinations of one primary-option group.

The marketplace only marks availability for values reachable from the
current selection. The primary dimension's non-selected alternatives are
plain links with no marker at all, so the primary row is overridden: the
currently selected value is available and every sibling is not.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set

from bs4 import BeautifulSoup, Tag

from petcatalog.adapters.html_document import element_text
from petcatalog.config import config
from petcatalog.models.catalog import AvailabilityMap, VariantCombination, availability_key
from petcatalog.parsers.options import find_option_rows, find_twister_root, row_dimension_name
from petcatalog.utils.logger import ParserLogger

VALUE_LIST_SELECTOR = 'ul[role="radiogroup"]'
VALUE_TEXT_SELECTOR = ".swatch-title-text-display, .swatch-title-text, .swatch-title-text-single-line"
SELECTED_VALUE_SELECTOR = ".inline-twister-dim-title-value"
SLOT_ATTRIBUTE = "data-csa-c-slot-id"


@dataclass
class SwatchState:
    """One value entry of a dimension row."""
    value: str
    slot_id: str
    available: bool


@dataclass
class AvailabilityDecision:
    """Outcome for one combination, with the reason for every pair."""
    combination_id: str
    available: bool
    reasons: List[str] = field(default_factory=list)


def read_swatches(row: Tag, marker: str) -> List[SwatchState]:
    """List entries of a row with their slot marker availability."""
    value_list = row.select_one(VALUE_LIST_SELECTOR)
    if value_list is None:
        return []

    swatches: List[SwatchState] = []
    for item in value_list.find_all("li"):
        value = element_text(item.select_one(VALUE_TEXT_SELECTOR))
        if not value:
            continue
        slot_id = item.get(SLOT_ATTRIBUTE) or ""
        swatches.append(SwatchState(value=value, slot_id=slot_id, available=marker in slot_id))
    return swatches


def read_selected_value(row: Tag) -> Optional[str]:
    """The value shown as current in the row title, if any."""
    return element_text(row.select_one(SELECTED_VALUE_SELECTOR)) or None


class AvailabilityParser:
    """Builds AvailabilityMaps and applies them to combination groups."""

    def __init__(
        self,
        logger: Optional[ParserLogger] = None,
        available_marker: Optional[str] = None,
        permissive_secondary: Optional[bool] = None,
    ):
        self.logger = logger or ParserLogger("availability_parser")
        self.available_marker = available_marker or config.AVAILABLE_SLOT_MARKER
        self.permissive_secondary = (
            config.PERMISSIVE_SECONDARY_AVAILABILITY
            if permissive_secondary is None else permissive_secondary
        )

    def parse_availability(self, document: BeautifulSoup, primary_dimension_name: str) -> AvailabilityMap:
        """
        Build the "{dimension}:{value}" -> available map for one snapshot.

        Raises:
            StructuralParseError: If the twister root is missing
        """
        root = find_twister_root(document)
        rows: Dict[str, Tag] = {}
        for row in find_option_rows(root):
            rows.setdefault(row_dimension_name(row), row)

        availability: AvailabilityMap = {}
        for name, row in rows.items():
            for swatch in read_swatches(row, self.available_marker):
                availability[availability_key(name, swatch.value)] = swatch.available
                self.logger.log_strategy(
                    "availability",
                    "slot_marker",
                    matched=swatch.available,
                    key=availability_key(name, swatch.value),
                    slot_id=swatch.slot_id,
                )

        primary_row = rows.get(primary_dimension_name)
        selected = read_selected_value(primary_row) if primary_row is not None else None
        if selected:
            self._override_primary(availability, primary_row, primary_dimension_name, selected)
        else:
            self.logger.log_decision(
                decision="primary_override_skipped",
                reason="No current value found for the primary dimension",
                primary_dimension=primary_dimension_name,
            )

        self.logger.log_action(
            "availability_parse",
            "completed",
            primary_dimension=primary_dimension_name,
            selected_primary=selected,
            available=sorted(k for k, v in availability.items() if v),
            unavailable=sorted(k for k, v in availability.items() if not v),
        )
        return availability

    def _override_primary(
        self,
        availability: AvailabilityMap,
        row: Tag,
        dimension: str,
        selected: str,
    ) -> None:
        availability[availability_key(dimension, selected)] = True
        for swatch in read_swatches(row, self.available_marker):
            if swatch.value != selected:
                availability[availability_key(dimension, swatch.value)] = False

        self.logger.log_decision(
            decision="primary_override",
            reason="Only the selected primary value is marked available",
            primary_dimension=dimension,
            selected_value=selected,
        )

    def evaluate_combination(
        self,
        availability: AvailabilityMap,
        combination: VariantCombination,
        group_name: str,
        primary_dimension_name: str,
        permissive_secondary: Optional[bool] = None,
    ) -> AvailabilityDecision:
        """Decide one combination; any explicit False vetoes it."""
        permissive = self.permissive_secondary if permissive_secondary is None else permissive_secondary
        decision = AvailabilityDecision(combination_id=combination.id, available=True)

        for dimension, value in combination.values.items():
            key = availability_key(dimension, value)
            known = availability.get(key)

            if known is False:
                decision.available = False
                decision.reasons.append(f"{key} is explicitly unavailable")
                break
            if known is True:
                decision.reasons.append(f"{key} is explicitly available")
            elif dimension == primary_dimension_name:
                if value == group_name:
                    decision.reasons.append(f"{key} matches group name (primary option)")
                else:
                    decision.available = False
                    decision.reasons.append(f"{key} differs from group name (primary option)")
                    break
            elif permissive:
                decision.reasons.append(f"{key} has no explicit data (secondary option, assumed available)")
            else:
                decision.available = False
                decision.reasons.append(f"{key} has no explicit data (secondary option, strict mode)")
                break

        return decision

    def apply_availability(
        self,
        availability: AvailabilityMap,
        combinations: Iterable[VariantCombination],
        group_name: str,
        primary_dimension_name: str,
        selected: Optional[Iterable[str]] = None,
        permissive_secondary: Optional[bool] = None,
    ) -> Set[str]:
        """
        Apply an AvailabilityMap to the combinations of one group.

        Only combinations whose primary value equals group_name are touched.
        Available ones are added to the selection and unavailable ones are
        removed. Returns a new set; the caller's selection is not modified.
        """
        new_selected: Set[str] = set(selected or ())
        decisions: Dict[str, bool] = {}

        for combination in combinations:
            if combination.values.get(primary_dimension_name) != group_name:
                continue
            decision = self.evaluate_combination(
                availability, combination, group_name, primary_dimension_name, permissive_secondary
            )
            decisions[combination.id] = decision.available
            if decision.available:
                new_selected.add(combination.id)
            else:
                new_selected.discard(combination.id)

            self.logger.log_decision(
                decision="selected" if decision.available else "deselected",
                reason="; ".join(decision.reasons),
                combination=combination.id,
                group=group_name,
            )

        self.logger.log_action(
            "availability_apply",
            "completed",
            group=group_name,
            evaluated=len(decisions),
            available=sum(1 for v in decisions.values() if v),
        )
        return new_selected

"""
Combination Generator.
Expands selected option values into the candidate variant list.
"""
from itertools import product
from typing import Dict, List, Mapping, Optional, Sequence

from petcatalog.models.catalog import OptionDimension, VariantCombination
from petcatalog.utils.logger import ParserLogger

ID_DELIMITER = "_"
PAIR_DELIMITER = ", "
TITLE_DELIMITER = " × "


def selected_values_for(
    dimension: OptionDimension,
    selected_values: Optional[Mapping[str, Sequence[str]]],
) -> List[str]:
    """The dimension's chosen subset, kept in the dimension's own value order."""
    if selected_values is None or dimension.name not in selected_values:
        return list(dimension.values)
    chosen = set(selected_values[dimension.name])
    return [value for value in dimension.values if value in chosen]


class CombinationGenerator:
    """Cartesian product of selected dimension values."""

    def __init__(self, logger: Optional[ParserLogger] = None):
        self.logger = logger or ParserLogger("combination_generator")

    def generate(
        self,
        dimensions: Sequence[OptionDimension],
        selected_values: Optional[Mapping[str, Sequence[str]]] = None,
    ) -> List[VariantCombination]:
        """
        Build every combination, dimension order first, then value order.

        Args:
            dimensions: Option dimensions in display order
            selected_values: Optional name -> chosen values; dimensions not
                listed use all of their values

        Returns:
            Combinations; empty when there are no dimensions
        """
        if not dimensions:
            return []

        axes = [selected_values_for(d, selected_values) for d in dimensions]
        combinations = [
            self._build(dimensions, chosen)
            for chosen in product(*axes)
        ]

        self.logger.log_action(
            "combination_generation",
            "completed",
            dimensions=[d.name for d in dimensions],
            count=len(combinations),
        )
        return combinations

    def _build(self, dimensions: Sequence[OptionDimension], chosen: Sequence[str]) -> VariantCombination:
        return VariantCombination(
            id=ID_DELIMITER.join(chosen),
            values={d.name: value for d, value in zip(dimensions, chosen)},
            display_name=PAIR_DELIMITER.join(
                f"{d.display_name}: {value}" for d, value in zip(dimensions, chosen)
            ),
            title=TITLE_DELIMITER.join(chosen),
        )


def group_combinations(
    combinations: Sequence[VariantCombination],
    primary_dimension_name: str,
) -> Dict[str, List[VariantCombination]]:
    """Bucket combinations by their primary value, in first-seen order."""
    groups: Dict[str, List[VariantCombination]] = {}
    for combination in combinations:
        primary_value = combination.values.get(primary_dimension_name)
        if primary_value is None:
            continue
        groups.setdefault(primary_value, []).append(combination)
    return groups

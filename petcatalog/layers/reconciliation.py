"""
Option-Value Reconciler.

Compares extracted option dimensions with the stored taxonomy and writes
only what is missing. Stored entries are never renamed or overwritten.
"""
from typing import Awaitable, Callable, List, Optional, Sequence

from petcatalog.adapters.catalog_store import CatalogStore
from petcatalog.config import config
from petcatalog.models.catalog import (
    CommitSummary,
    OptionAnalysis,
    OptionDimension,
    ReconciliationConflict,
    StoredDimension,
)
from petcatalog.utils.logger import ParserLogger

OPTION_TYPES_TABLE = "product_options"
OPTION_VALUES_TABLE = "option_values"

CatalogLookup = Callable[[str], Awaitable[Optional[StoredDimension]]]


class OptionReconciler:
    """
    Splits incoming values into known and new, and commits the new ones.

    Matching is exact by default. Values that differ only by case are
    treated as different unless case-insensitive matching is configured.
    """

    def __init__(
        self,
        store: CatalogStore,
        case_sensitive: Optional[bool] = None,
        logger: Optional[ParserLogger] = None,
    ):
        self.store = store
        self.case_sensitive = config.OPTION_MATCH_CASE_SENSITIVE if case_sensitive is None else case_sensitive
        self.logger = logger or ParserLogger("option_reconciler")

    def _match_key(self, value: str) -> str:
        return value if self.case_sensitive else value.casefold()

    async def lookup_dimension(self, name: str) -> Optional[StoredDimension]:
        """Read an option type and its values by machine name."""
        option_types = await self.store.find(OPTION_TYPES_TABLE, {"name": name})
        if not option_types:
            return None

        option_type = option_types[0]
        value_rows = await self.store.find(OPTION_VALUES_TABLE, {"option_type_id": option_type["id"]})
        return StoredDimension(
            id=option_type["id"],
            name=option_type["name"],
            display_name=option_type.get("label") or option_type["name"],
            values=[row["value"] for row in value_rows],
        )

    def partition(self, dimension: OptionDimension, stored: Optional[StoredDimension]) -> OptionAnalysis:
        """Classify every incoming value into exactly one bucket."""
        if stored is None:
            return OptionAnalysis(
                dimension=dimension,
                is_new_dimension=True,
                new_values=list(dimension.values),
                existing_values=[],
            )

        known = {self._match_key(value) for value in stored.values}
        new_values = [v for v in dimension.values if self._match_key(v) not in known]
        existing_values = [v for v in dimension.values if self._match_key(v) in known]

        conflict = None
        if stored.display_name != dimension.display_name:
            conflict = ReconciliationConflict(
                dimension_name=dimension.name,
                extracted_display_name=dimension.display_name,
                stored_display_name=stored.display_name,
            )
            self.logger.log_decision(
                decision="keep_stored_display_name",
                reason="Extracted display name differs from the stored one",
                dimension=dimension.name,
                extracted=dimension.display_name,
                stored=stored.display_name,
            )

        return OptionAnalysis(
            dimension=dimension,
            is_new_dimension=False,
            new_values=new_values,
            existing_values=existing_values,
            stored_display_name=stored.display_name,
            conflict=conflict,
        )

    async def analyze(
        self,
        dimensions: Sequence[OptionDimension],
        lookup: Optional[CatalogLookup] = None,
    ) -> List[OptionAnalysis]:
        """
        Diff extracted dimensions against the catalog.

        Args:
            dimensions: Extracted option dimensions
            lookup: Async name -> StoredDimension | None reader; defaults to
                reading the catalog store

        Returns:
            One OptionAnalysis per dimension, in input order
        """
        lookup = lookup or self.lookup_dimension
        analyses = []
        for dimension in dimensions:
            analyses.append(self.partition(dimension, await lookup(dimension.name)))

        self.logger.log_action(
            "option_analysis",
            "completed",
            dimensions=len(analyses),
            new_dimensions=sum(1 for a in analyses if a.is_new_dimension),
            new_values=sum(len(a.new_values) for a in analyses),
        )
        return analyses

    async def commit(self, analyses: Sequence[OptionAnalysis]) -> CommitSummary:
        """
        Persist new option types and values.

        Each dimension's stored values are re-read right before writing, so
        committing the same analysis twice writes nothing the second time.
        """
        summary = CommitSummary()

        for analysis in analyses:
            dimension = analysis.dimension
            stored = await self.lookup_dimension(dimension.name)

            if stored is None:
                [option_type_id] = await self.store.insert(OPTION_TYPES_TABLE, [{
                    "name": dimension.name,
                    "label": dimension.display_name,
                    "data_type": "select",
                    "unit": None,
                    "options": list(dimension.values),
                }])
                summary.new_dimensions += 1
                known = set()
                self.logger.log_decision(
                    decision="create_option_type",
                    reason="No stored option type with this name",
                    dimension=dimension.name,
                )
            else:
                option_type_id = stored.id
                summary.reused_dimensions += 1
                known = {self._match_key(v) for v in stored.values}

            to_insert = []
            for value in dimension.values:
                key = self._match_key(value)
                if key in known:
                    continue
                known.add(key)
                to_insert.append({"option_type_id": option_type_id, "value": value, "label": value})

            if not to_insert:
                self.logger.log_decision(
                    decision="skip_values",
                    reason="All values already stored",
                    dimension=dimension.name,
                )
                continue

            await self.store.insert(OPTION_VALUES_TABLE, to_insert)
            summary.new_values += len(to_insert)
            self.logger.log_action(
                "option_values_insert",
                "completed",
                dimension=dimension.name,
                values=[row["value"] for row in to_insert],
            )

        self.logger.log_action("option_commit", "completed", summary=summary.describe())
        return summary

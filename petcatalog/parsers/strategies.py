"""
Ordered extraction strategies.

Each extraction target (identifiers, ingredients, image URL, ...) is an
ordered list of named strategy functions. A strategy takes the document and
returns a result or None; an empty result counts as no match.
"""
from dataclasses import dataclass
from typing import Any, Callable, Generic, List, Optional, Sequence, Tuple, TypeVar

from bs4 import BeautifulSoup

from petcatalog.utils.logger import ParserLogger

T = TypeVar("T")


@dataclass(frozen=True)
class Strategy(Generic[T]):
    """A named extraction strategy."""
    name: str
    func: Callable[[BeautifulSoup], Optional[T]]

    def __call__(self, document: BeautifulSoup) -> Optional[T]:
        return self.func(document)


@dataclass(frozen=True)
class StrategyMatch(Generic[T]):
    """The winning strategy and what it returned."""
    strategy: str
    value: T


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    try:
        return len(value) == 0
    except TypeError:
        return False


def first_success(
    strategies: Sequence[Strategy[T]],
    document: BeautifulSoup,
    logger: ParserLogger,
    target: str,
) -> Optional[StrategyMatch[T]]:
    """
    Run strategies in order and return the first non-empty result.

    Later strategies are only evaluated when every earlier one came back
    empty.
    """
    for strategy in strategies:
        value = strategy(document)
        if _is_empty(value):
            logger.log_strategy(target, strategy.name, matched=False)
            continue
        logger.log_strategy(target, strategy.name, matched=True)
        return StrategyMatch(strategy=strategy.name, value=value)

    logger.log_decision(
        decision=f"{target}_not_found",
        reason="No strategy produced a result",
        strategies_tried=[s.name for s in strategies],
    )
    return None


def collect_all(
    strategies: Sequence[Strategy[T]],
    document: BeautifulSoup,
    logger: ParserLogger,
    target: str,
) -> List[Tuple[str, T]]:
    """Run every strategy and return the non-empty results in strategy order."""
    results: List[Tuple[str, T]] = []
    for strategy in strategies:
        value = strategy(document)
        matched = not _is_empty(value)
        logger.log_strategy(target, strategy.name, matched=matched)
        if matched:
            results.append((strategy.name, value))
    return results

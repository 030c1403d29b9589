"""Locate the receipt's price column by clustering price positions."""

from collections.abc import Iterable
from dataclasses import dataclass

from splitscan.domain.receipt import PriceCandidate, TextFragment
from splitscan.receipt.parser_config import ParserConfig
from splitscan.runtime.logging import get_logger

from .common import _fragment_price

logger = get_logger(__name__)


@dataclass
class _PriceCluster:
    center: float
    count: int = 1


def _collect_price_candidates(fragments: Iterable[TextFragment]) -> list[PriceCandidate]:
    candidates: list[PriceCandidate] = []
    for fragment in fragments:
        price = _fragment_price(fragment)
        if price is None:
            continue
        candidates.append(PriceCandidate(fragment=fragment, value=price, horizontal_position=fragment.horizontal))
        logger.debug("Found price %s at horizontal position %.4f", price, fragment.horizontal)
    return candidates


def find_price_column(fragments: Iterable[TextFragment], config: ParserConfig) -> float | None:
    """
    Return the dominant horizontal position of price text.

    Each price joins the nearest existing cluster whose seed position is
    within `config.column_tolerance`, otherwise it seeds a new cluster.
    Clusters keep their seed as center. The largest cluster wins; on a tie
    the earliest-created one does.
    """
    clusters: list[_PriceCluster] = []
    for candidate in _collect_price_candidates(fragments):
        position = candidate.horizontal_position
        nearest: _PriceCluster | None = None
        nearest_distance = config.column_tolerance
        for cluster in clusters:
            distance = abs(cluster.center - position)
            if distance < nearest_distance:
                nearest = cluster
                nearest_distance = distance
        if nearest is None:
            clusters.append(_PriceCluster(center=position))
        else:
            nearest.count += 1

    if not clusters:
        logger.debug("No price-shaped fragments; no price column")
        return None

    for cluster in clusters:
        logger.debug("Price cluster at %.4f: %d prices", cluster.center, cluster.count)

    best = max(clusters, key=lambda c: c.count)
    return best.center

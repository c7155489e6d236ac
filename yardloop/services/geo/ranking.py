from datetime import datetime
from typing import Protocol, Sequence, TypeVar


class Rankable(Protocol):
    id: int
    created_at: datetime
    distance_km: float | None


R = TypeVar("R", bound=Rankable)


def _recency_key(result: Rankable) -> tuple[float, int]:
    return (result.created_at.timestamp(), result.id)


def _distance_key(result: Rankable) -> tuple[bool, float]:
    # rows without a distance go last
    if result.distance_km is None:
        return (True, 0.0)
    return (False, result.distance_km)


def rank_results(results: Sequence[R], location_active: bool) -> list[R]:
    """
    Newest first; with an active reference point nearest first and the
    creation time only breaks ties. Both sorts are stable.
    """
    ranked = sorted(results, key=_recency_key, reverse=True)
    if location_active:
        ranked.sort(key=_distance_key)
    return ranked

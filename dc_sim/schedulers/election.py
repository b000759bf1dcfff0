"""Server election strategies shared by the dispatch policies."""

from __future__ import annotations

from typing import Collection, Optional, Sequence

from dc_sim.model import Server


def _is_free(index: int, server: Server, released: Collection[int]) -> bool:
    return server.idle or index in released


def first_available(servers: Sequence[Server], released: Collection[int] = ()) -> Optional[int]:
    """Index of the first idle server in fixed order."""
    for index, server in enumerate(servers):
        if _is_free(index, server, released):
            return index
    return None


def most_powerful_available(servers: Sequence[Server], released: Collection[int] = ()) -> Optional[int]:
    """Index of the idle server with the highest score, lowest index on ties.

    ``released`` holds servers a policy is about to preempt and may treat as
    idle. Zero-score servers are never elected.
    """
    best: Optional[int] = None
    best_score = 0.0
    for index, server in enumerate(servers):
        if not _is_free(index, server, released):
            continue
        if server.score > best_score:
            best = index
            best_score = server.score
    return best

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..listing.screen import ListScreen


@dataclass(frozen=True)
class DashboardTile:
    key: str
    title: str
    total: int
    pending: int
    error: Optional[str] = None


async def build_dashboard(screens: Sequence[ListScreen]) -> List[DashboardTile]:
    """Load every screen concurrently; a failed screen only marks its own tile."""
    await asyncio.gather(*(s.refresh() for s in screens))
    return [
        DashboardTile(
            key=s.config.key,
            title=s.config.title,
            total=len(s.store),
            pending=s.pending_count(),
            error=s.error,
        )
        for s in screens
    ]

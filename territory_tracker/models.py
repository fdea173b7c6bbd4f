from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .geometry.models import ClaimableLoop, LatLon, MapRegion


@dataclass
class RunSummary:
    valid: bool
    reasons: List[str]
    loops: List[ClaimableLoop]
    region: Optional[MapRegion]
    route: List[LatLon]
    total_distance_m: float
    duration_s: float
    elevation_gain_m: float
    accepted_fixes: int
    # Fixes dropped at ingestion, keyed by rejection reason
    rejected_fixes: Dict[str, int] = field(default_factory=dict)

    @property
    def is_closed_loop(self) -> bool:
        return bool(self.loops)

    @property
    def can_claim_territory(self) -> bool:
        return self.valid and self.is_closed_loop

    @property
    def avg_speed_mps(self) -> float:
        if self.duration_s <= 0:
            return 0.0
        return self.total_distance_m / self.duration_s

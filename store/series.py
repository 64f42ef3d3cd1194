"""
JSON codec for cached upstream series: raw observations plus any recharge
entries the observation source supplied.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import math
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from engine.models import Observation, RechargeEntry


def _depth_out(depth: float) -> Optional[float]:
    # JSON has no NaN; the normalizer drops these either way
    return depth if math.isfinite(depth) else None


def _depth_in(value: Optional[float]) -> float:
    return float("nan") if value is None else float(value)


def encode(observations: List[Observation], recharge: List[RechargeEntry]) -> Dict[str, Any]:
    return {
        "observations": [
            {"date": o.date.isoformat(), "depth": _depth_out(o.depth)} for o in observations
        ],
        "recharge": [
            {
                "year": r.year,
                "pre_monsoon_depth": r.pre_monsoon_depth,
                "post_monsoon_depth": r.post_monsoon_depth,
                "recharge_amount": r.recharge_amount,
            }
            for r in recharge
        ],
    }


def decode(payload: Dict[str, Any]) -> Tuple[List[Observation], List[RechargeEntry]]:
    observations = [
        Observation(date=date.fromisoformat(d["date"]), depth=_depth_in(d.get("depth")))
        for d in payload.get("observations", [])
    ]
    recharge = [
        RechargeEntry(
            year=int(d["year"]),
            pre_monsoon_depth=d["pre_monsoon_depth"],
            post_monsoon_depth=d["post_monsoon_depth"],
            recharge_amount=d["recharge_amount"],
        )
        for d in payload.get("recharge", [])
    ]
    return observations, recharge

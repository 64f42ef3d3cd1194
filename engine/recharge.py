"""
Annual recharge pattern (pre-monsoon mean depth minus post-monsoon mean depth)
and its multi-year trend.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from engine.constants import LEVEL_DECIMALS, RECHARGE_TOLERANCE
from engine.models import Observation, RechargeEntry
from engine.seasonal import POST_MONSOON, PRE_MONSOON

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class RechargeTrend:
    annual_change: Optional[float]
    description: str


def derive(observations: Sequence[Observation]) -> List[RechargeEntry]:
    groups: Dict[int, Tuple[List[float], List[float]]] = {}
    for o in observations:
        pre, post = groups.setdefault(o.date.year, ([], []))
        if PRE_MONSOON.contains(o.date.month):
            pre.append(o.depth)
        elif POST_MONSOON.contains(o.date.month):
            post.append(o.depth)

    entries = []
    for year in sorted(groups):
        pre, post = groups[year]
        if not pre or not post:
            continue
        avg_pre = round(float(np.mean(pre)), LEVEL_DECIMALS)
        avg_post = round(float(np.mean(post)), LEVEL_DECIMALS)
        entries.append(RechargeEntry(
            year=year,
            pre_monsoon_depth=avg_pre,
            post_monsoon_depth=avg_post,
            recharge_amount=round(avg_pre - avg_post, LEVEL_DECIMALS),
        ))
    return entries


def reconcile(entries: Sequence[RechargeEntry]) -> Tuple[List[RechargeEntry], List[str]]:
    fixed: List[RechargeEntry] = []
    warnings: List[str] = []
    for e in sorted(entries, key=lambda e: e.year):
        expected = e.pre_monsoon_depth - e.post_monsoon_depth
        if abs(e.recharge_amount - expected) > RECHARGE_TOLERANCE:
            warnings.append(
                f"Recharge for {e.year} recomputed: reported {e.recharge_amount}, "
                f"pre-post difference is {round(expected, LEVEL_DECIMALS)}"
            )
            e = replace(e, recharge_amount=round(expected, LEVEL_DECIMALS))
        fixed.append(e)
    return fixed, warnings


def pattern(
    observations: Sequence[Observation],
    upstream: Sequence[RechargeEntry] = (),
) -> Tuple[List[RechargeEntry], List[str]]:
    if upstream:
        return reconcile(upstream)
    return derive(observations), []


def trend(entries: Sequence[RechargeEntry]) -> RechargeTrend:
    if not entries:
        return RechargeTrend(None, "Insufficient pre/post-monsoon data pairs to compute recharge pattern")
    if len(entries) < 3:
        return RechargeTrend(None, "Too few recharge years to estimate a trend")
    years = np.array([e.year for e in entries], dtype=float)
    amounts = np.array([e.recharge_amount for e in entries], dtype=float)
    if float(np.ptp(years)) == 0:
        return RechargeTrend(None, "Too few recharge years to estimate a trend")
    slope = float(np.polyfit(years - years[0], amounts, 1)[0])
    return RechargeTrend(
        annual_change=round(slope, LEVEL_DECIMALS),
        description="Increasing recharge" if slope > 0 else "Decreasing recharge",
    )

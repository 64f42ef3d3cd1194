"""
Deterministic cache keys built from an operation name and its parameters.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import hashlib
import json
from typing import Any, Mapping


def _slug(value: str) -> str:
    # Internal cache keys do not require reversibility; use strong stable hashing.
    return hashlib.sha256(value.encode()).hexdigest()[:32]


def make(operation: str, params: Mapping[str, Any]) -> str:
    encoded = json.dumps(dict(params), sort_keys=True, separators=(",", ":"), default=str)
    return f"{operation}:{encoded}"


def storage(prefix: str, key: str) -> str:
    return f"{prefix}{key.split(':', 1)[0]}:{_slug(key)}"

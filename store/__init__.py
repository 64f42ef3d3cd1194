"""
Initialization of the store package, exposing the client, the result cache and codecs.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from store.client import StoreClient
from store.cache import CacheEntry, CacheLookup, CacheTier, ResultCache
from store import keys, series, stations

__all__ = [
    "StoreClient", "CacheEntry", "CacheLookup", "CacheTier", "ResultCache",
    "keys", "series", "stations",
]

from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WaterLevelRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    lat: float
    lon: float
    date: Optional[dt.date] = None

    def as_of(self) -> dt.date:
        return self.date or dt.date.today()

"""
Factory for creating data source connectors based on configuration.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from connectors.http import HttpObservationSource, HttpStationDirectory
from connectors.static import FileStationDirectory


class DataSourceFactory:

    @staticmethod
    def create_stations(config):
        from config import STATIONS_BACKEND_FILE, STATIONS_BACKEND_HTTP
        if config.stations_backend == STATIONS_BACKEND_HTTP:
            return HttpStationDirectory(
                config.stations_url,
                limit=config.stations_limit,
                timeout=config.connector_timeout,
            )
        if config.stations_backend == STATIONS_BACKEND_FILE:
            if not config.stations_file:
                raise ValueError("AQUIFER_STATIONS_FILE is required for the file stations backend")
            return FileStationDirectory(config.stations_file)
        raise ValueError("Unsupported stations backend")

    @staticmethod
    def create_observations(config):
        from config import OBSERVATIONS_BACKEND_HTTP
        if config.observations_backend == OBSERVATIONS_BACKEND_HTTP:
            return HttpObservationSource(
                config.observations_url,
                history_years=config.history_years,
                timeout=config.connector_timeout,
            )
        raise ValueError("Unsupported observations backend")

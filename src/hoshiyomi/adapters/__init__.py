# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Adapters for moon table export and the HTTP service.

External dependencies (csv, http, file I/O) are confined to this layer.
"""
from hoshiyomi.adapters.csv_exporter import CsvMoonInfoExporter
from hoshiyomi.adapters.moon_server import (
    MoonInfoHandler,
    create_moon_server,
)

__all__ = [
    "CsvMoonInfoExporter",
    "MoonInfoHandler",
    "create_moon_server",
]

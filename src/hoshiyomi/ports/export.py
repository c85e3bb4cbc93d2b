# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Port interface for moon table export.

Adapters implement this to write computed MoonInfo records in various
formats (CSV, ...).
"""
from typing import Protocol, runtime_checkable

from hoshiyomi.domain.moon_info import MoonInfo


@runtime_checkable
class MoonInfoExporter(Protocol):
    """Port for exporting moon age/rise/set records to file."""

    def export(self, infos: list[MoonInfo], path: str) -> int:
        """
        Export moon records to a file.

        Args:
            infos: MoonInfo records, one per civil date.
            path: Output file path.

        Returns:
            Number of records exported.
        """
        ...

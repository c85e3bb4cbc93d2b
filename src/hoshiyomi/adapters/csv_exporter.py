# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
CSV moon table exporter.

Writes one row per civil date with the Moon age and the rise/set instants.
External dependencies (csv, file I/O) are confined to this adapter.
"""
import csv
import logging

from hoshiyomi.ports.export import MoonInfoExporter
from hoshiyomi.domain.moon_info import MoonInfo

logger = logging.getLogger(__name__)

_HEADER = [
    'date', 'latitude_deg', 'longitude_deg', 'moon_age_days',
    'moon_rise', 'moon_set',
]


def _crossing_cell(value, condition) -> str:
    if value is not None:
        return value.isoformat()
    return condition.value if condition is not None else ''


class CsvMoonInfoExporter(MoonInfoExporter):
    """Exports moon age/rise/set records to CSV."""

    def export(self, infos: list[MoonInfo], path: str) -> int:
        with open(path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)
            writer.writerow(_HEADER)

            for info in infos:
                if info.moon_rise is None or info.moon_set is None:
                    logger.info(
                        "%s: moon does not cross the horizon (rise=%s, set=%s)",
                        info.date.isoformat(),
                        _crossing_cell(info.moon_rise, info.moon_rise_condition),
                        _crossing_cell(info.moon_set, info.moon_set_condition),
                    )
                writer.writerow([
                    info.date.isoformat(),
                    f'{info.position.latitude_deg:.6f}',
                    f'{info.position.longitude_deg:.6f}',
                    f'{info.age_days:.4f}',
                    _crossing_cell(info.moon_rise, info.moon_rise_condition),
                    _crossing_cell(info.moon_set, info.moon_set_condition),
                ])

        logger.debug("Wrote %d moon records to %s", len(infos), path)
        return len(infos)

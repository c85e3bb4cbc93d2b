# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Port interfaces for moon data output.

Adapters implement these to handle different output formats.
"""
from hoshiyomi.ports.export import MoonInfoExporter

__all__ = ["MoonInfoExporter"]

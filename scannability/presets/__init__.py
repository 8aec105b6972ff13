"""
Built-in Presets

Platform presets are partial overrides merged onto the global preset at
import time. Unknown ids and unrecognized sites fall back to global.

Usage:
    from scannability.presets import detect_preset, get_preset_by_id
    preset = detect_preset("https://acme.atlassian.net/wiki/spaces/ENG")
"""

from __future__ import annotations

from urllib.parse import urlparse

from scannability.merge import merge_preset
from scannability.preset import Preset
from scannability.presets.base import GLOBAL_ID, GLOBAL_PRESET
from scannability.presets.confluence import CONFLUENCE_OVERRIDE
from scannability.presets.notion import NOTION_OVERRIDE

CONFLUENCE_PRESET = merge_preset(GLOBAL_PRESET, CONFLUENCE_OVERRIDE)
NOTION_PRESET = merge_preset(GLOBAL_PRESET, NOTION_OVERRIDE)

PRESETS: list[Preset] = [GLOBAL_PRESET, CONFLUENCE_PRESET, NOTION_PRESET]

PRESET_MAP: dict[str, Preset] = {preset.id: preset for preset in PRESETS}


def get_preset_by_id(preset_id: str) -> Preset:
    return PRESET_MAP.get(preset_id, GLOBAL_PRESET)


def detect_preset(url: str) -> Preset:
    """Pick the preset whose domain rule appears in the URL's hostname."""
    try:
        hostname = urlparse(url).hostname or ""
    except ValueError:
        return GLOBAL_PRESET

    for preset in PRESETS:
        if preset.id == GLOBAL_ID:
            continue
        if hostname and preset.matches_host(hostname):
            return preset
    return GLOBAL_PRESET


__all__ = [
    "CONFLUENCE_PRESET",
    "GLOBAL_PRESET",
    "NOTION_PRESET",
    "PRESETS",
    "PRESET_MAP",
    "detect_preset",
    "get_preset_by_id",
]

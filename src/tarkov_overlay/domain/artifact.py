"""Hash-stamped merged overlay artifact.

The ``sha256`` in ``$meta`` covers the 2-space indented JSON serialization of
the whole document with ``$meta.sha256`` removed. To verify, drop the field,
re-serialize with :func:`serialize_artifact` and compare digests.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from tarkov_overlay.domain.errors import InvalidOverlayDataError
from tarkov_overlay.domain.overlay.model import META_KEY, MODES_KEY

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(frozen=True, slots=True)
class ArtifactSummary:
    entity_counts: dict[str, int] = field(default_factory=dict["str", "int"])
    mode_counts: dict[str, dict[str, int]] = field(
        default_factory=dict["str", "dict[str, int]"]
    )


def serialize_artifact(data: Mapping[str, object]) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


def compute_sha256(content: str) -> str:
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def format_generated(moment: datetime) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a ``Z`` suffix."""

    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def stamp_artifact(
    data: Mapping[str, object],
    *,
    version: str,
    generated: datetime,
) -> dict[str, object]:
    """Return ``data`` with a ``$meta`` block carrying version, timestamp and hash."""

    if META_KEY in data:
        raise InvalidOverlayDataError(f"Source data must not define {META_KEY}")

    output: dict[str, object] = dict(data)
    meta: dict[str, str] = {"version": version, "generated": format_generated(generated)}
    output[META_KEY] = meta
    meta["sha256"] = compute_sha256(serialize_artifact(output))
    return output


def verify_artifact(artifact: Mapping[str, object]) -> bool:
    meta = artifact.get(META_KEY)
    if not isinstance(meta, Mapping):
        return False
    expected = meta.get("sha256")
    if not isinstance(expected, str):
        return False

    stripped: dict[str, object] = dict(artifact)
    stripped[META_KEY] = {key: value for key, value in meta.items() if key != "sha256"}
    return compute_sha256(serialize_artifact(stripped)) == expected


def summarize_artifact(data: Mapping[str, object]) -> ArtifactSummary:
    entity_counts = {
        category: len(entries)
        for category, entries in data.items()
        if category not in {META_KEY, MODES_KEY} and isinstance(entries, Mapping)
    }
    mode_counts: dict[str, dict[str, int]] = {}
    modes = data.get(MODES_KEY)
    if isinstance(modes, Mapping):
        for mode, layer in modes.items():
            if isinstance(layer, Mapping):
                mode_counts[mode] = {
                    category: len(entries)
                    for category, entries in layer.items()
                    if isinstance(entries, Mapping)
                }
    return ArtifactSummary(entity_counts=entity_counts, mode_counts=mode_counts)

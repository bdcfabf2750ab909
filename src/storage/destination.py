# src/storage/destination.py - v2
"""Destination planner: where a batch directory lands under the output root.

    /data/Transfer/Exploris1/run42  + root /nas/out + trim "Transfer"
        -> /nas/out/Exploris1/run42
"""

from __future__ import annotations

from pathlib import Path, PurePath


def _find_segment(parts: tuple[str, ...], segment: tuple[str, ...]) -> int | None:
    """Index of the first run of ``segment`` in ``parts`` (case-insensitive)."""
    lowered = [p.lower() for p in parts]
    wanted = [s.lower() for s in segment]
    width = len(wanted)
    for start in range(len(lowered) - width + 1):
        if lowered[start:start + width] == wanted:
            return start
    return None


def relative_source_parts(source_dir: str | Path) -> tuple[str, ...]:
    """Components of ``source_dir`` with its root/drive prefix removed."""
    source = PurePath(source_dir)
    return source.parts[1:] if source.anchor else source.parts


def compute_destination(
    source_dir: str | Path,
    output_root: str | Path,
    trim_segment: str = "",
) -> Path:
    """Map a batch directory to its destination under ``output_root``.

    Args:
        source_dir: Batch directory holding the payload.
        output_root: Configured output root.
        trim_segment: Path component(s); everything up to and including the
            first match is dropped. Empty means no trimming.

    Returns:
        ``output_root`` joined with the remaining relative path, or
        ``output_root`` itself when nothing remains.
    """
    relative = relative_source_parts(source_dir)
    segment = PurePath(trim_segment.strip()).parts if trim_segment.strip() else ()

    if segment:
        start = _find_segment(relative, segment)
        if start is not None:
            relative = relative[start + len(segment):]

    root = Path(output_root)
    return root.joinpath(*relative) if relative else root

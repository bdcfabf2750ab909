# src/manifest/resolver.py - v1
"""Manifest resolver: pick the manifest that governs a batch directory.

Decision table over the candidate manifests of a directory:
  - none                 -> ResolutionError("no manifest found")
  - exactly one          -> use it
  - several              -> newest by mtime, accepted (with a warning) only if
                            it lists the triggering file; otherwise
                            ResolutionError asking to remove the extras

Mock mode skips the directory entirely and uses an injected file list.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path, PureWindowsPath

from msatrigger.config.settings import Settings
from msatrigger.core.errors import ManifestDecodeError, ResolutionError
from msatrigger.core.models import ResolvedManifest
from msatrigger.manifest.base_decoder import BaseManifestDecoder
from msatrigger.manifest.scratch import ScratchCopies

logger = logging.getLogger(__name__)

MOCK_MANIFEST_STEM = "MOCK_SLD_FILE"

# Authoring tools drop transient copies named <uuid>.<ext> next to the real one.
_UUID_STEM = r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}"


def parse_mock_sequence(text: str) -> list[str]:
    """Split a ';'-delimited file list, trimming entries and dropping blanks."""
    return [item.strip() for item in text.split(";") if item.strip()]


def base_name(path: str) -> str:
    """File name of a path written with either separator style."""
    return PureWindowsPath(path).name


def is_temp_manifest(path: Path, suffix: str) -> bool:
    """True for transient ``<uuid><suffix>`` files that must never be selected."""
    pattern = _UUID_STEM + re.escape(suffix)
    return re.fullmatch(pattern, Path(path).name, re.IGNORECASE) is not None


def list_manifest_candidates(batch_dir: Path, suffix: str, prefix: str) -> list[Path]:
    """Manifest files directly inside ``batch_dir`` that may govern the batch."""
    files = sorted(p for p in Path(batch_dir).iterdir() if p.is_file())
    logger.debug(
        "Directory '%s' contains files: [ %s ]",
        batch_dir, "; ".join(p.name for p in files),
    )
    manifests = [p for p in files if p.name.lower().endswith(suffix)]
    candidates = [
        p for p in manifests
        if not is_temp_manifest(p, suffix) and p.name.startswith(prefix)
    ]
    logger.debug(
        "Directory '%s' contains %d non-temp %s*%s files: [ %s ]",
        batch_dir, len(candidates), prefix, suffix,
        "; ".join(p.name for p in candidates),
    )
    return candidates


class ManifestResolver:
    """Locate and read the manifest for the first invocation of a batch."""

    def __init__(
        self,
        settings: Settings,
        decoder: BaseManifestDecoder,
        scratch: ScratchCopies,
    ) -> None:
        self._settings = settings
        self._decoder = decoder
        self._scratch = scratch

    def resolve(
        self,
        batch_dir: Path,
        trigger_file: Path,
        mock_sequence: list[str] | None = None,
    ) -> ResolvedManifest:
        """Return the governing manifest and its expected file names.

        Raises:
            ResolutionError: No manifest, ambiguous manifests, or unreadable manifest.
        """
        batch_dir = Path(batch_dir)
        if mock_sequence is not None:
            return self._resolve_mock(batch_dir, mock_sequence)

        suffix = self._settings.manifest_suffix
        prefix = self._settings.sld_starts_with
        candidates = list_manifest_candidates(batch_dir, suffix, prefix)

        if not candidates:
            raise ResolutionError(
                f"No {prefix}*{suffix} manifest files found in directory: '{batch_dir}'"
            )

        if len(candidates) == 1:
            chosen = candidates[0]
            logger.info("Using manifest file: %s", chosen)
            return ResolvedManifest(
                path=str(chosen), expected_names=self.expected_names(chosen)
            )

        logger.warning(
            "Directory '%s' contains %d matching manifest files (%s*%s), "
            "it should contain a single one",
            batch_dir, len(candidates), prefix, suffix,
        )
        newest = max(candidates, key=lambda p: p.stat().st_mtime)
        names = self.expected_names(newest)
        if trigger_file.name.lower() in {n.lower() for n in names}:
            logger.warning(
                'Newest manifest file lists this file\'s name, trying it: "%s"', newest,
            )
            return ResolvedManifest(path=str(newest), expected_names=names)

        raise ResolutionError(
            "Newest manifest file does not contain this file's name, cannot find "
            f"manifest file to use, please remove extra manifest files from: '{batch_dir}'"
        )

    def expected_names(self, manifest: Path) -> list[str]:
        """Decode ``manifest`` (through a working copy) into expected file names."""
        try:
            working = self._scratch.working_copy(manifest)
            samples = self._decoder.decode(working)
        except (OSError, ManifestDecodeError) as exc:
            raise ResolutionError(
                f"Could not retrieve sequence from manifest file: '{manifest}': {exc}"
            ) from exc

        suffix = self._settings.payload_suffix
        return [
            s.expected_name(suffix) for s in samples if s.raw_file_name.strip()
        ]

    def _resolve_mock(self, batch_dir: Path, mock_sequence: list[str]) -> ResolvedManifest:
        logger.info(
            "MOCK SEQUENCE MODE: mock sequence contents are: [ %s ]",
            ", ".join(mock_sequence),
        )
        names = [base_name(p) for p in mock_sequence if p.strip()]
        path = batch_dir / f"{MOCK_MANIFEST_STEM}{self._settings.manifest_suffix}"
        return ResolvedManifest(path=str(path), expected_names=names, mock=True)

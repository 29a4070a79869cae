#!/usr/bin/env python3
"""Print the tag metadata stored in CAF files.

Examples
--------
    python tools/read_caf_metadata.py song.caf
    python tools/read_caf_metadata.py loops/ --json
    python tools/read_caf_metadata.py "loops/**/*.caf" --json
    python tools/read_caf_metadata.py song.caf --keys tempo "key signature"
"""

from __future__ import annotations

import argparse
import glob
import json
import logging
import sys
from pathlib import Path
from typing import Iterable, List

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from caf.chunks import CAF_EXTENSIONS  # noqa: E402
from caf.container import CafMetadata, inspect_file  # noqa: E402
from caf.midi_metadata import MIDI_DATA_BASE64_KEY  # noqa: E402

logger = logging.getLogger("read_caf_metadata")


def expand_targets(args: Iterable[str]) -> List[Path]:
    """Expand CLI arguments into files to inspect.

    Existing files are taken as given, directories are searched recursively
    for CAF extensions, and anything else is treated as a glob pattern.
    """
    found: List[Path] = []
    for arg in args:
        path = Path(arg)
        if path.is_dir():
            found.extend(
                sorted(p for p in path.rglob("*") if p.is_file() and p.suffix.lower() in CAF_EXTENSIONS)
            )
        elif path.is_file():
            found.append(path)
        else:
            found.extend(sorted(Path(p) for p in glob.glob(arg, recursive=True) if Path(p).is_file()))
    return list(dict.fromkeys(found))


def select_values(result: CafMetadata, keys: list[str] | None, show_midi: bool) -> dict[str, str]:
    values = dict(result.values)
    if keys:
        values = {k: v for k, v in values.items() if k in keys}
    if not show_midi and MIDI_DATA_BASE64_KEY in values:
        values[MIDI_DATA_BASE64_KEY] = f"<{len(values[MIDI_DATA_BASE64_KEY])} base64 chars>"
    return values


def format_table(results: list[CafMetadata], keys: list[str] | None, show_midi: bool) -> str:
    lines: list[str] = []
    for result in results:
        lines.append(str(result.path))
        if not result.recognised:
            lines.append("  (not a CAF file)")
            continue
        values = select_values(result, keys, show_midi)
        if not values:
            lines.append("  (no metadata)")
            continue
        width = max(len(k) for k in values)
        for key, value in values.items():
            lines.append(f"  {key.ljust(width)}  {value}")
    return "\n".join(lines)


def format_json(results: list[CafMetadata], keys: list[str] | None, show_midi: bool) -> str:
    payload = [
        {
            "path": str(result.path),
            "recognised": result.recognised,
            "metadata": select_values(result, keys, show_midi),
        }
        for result in results
    ]
    return json.dumps(payload, indent=2)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Show tag metadata stored in CAF files.")
    parser.add_argument(
        "paths",
        nargs="+",
        help="Files, directories (searched for .caf files) or glob patterns.",
    )
    parser.add_argument("--json", action="store_true", help="Emit JSON instead of a table.")
    parser.add_argument("--keys", nargs="+", help="Only show these metadata keys.")
    parser.add_argument(
        "--show-midi",
        action="store_true",
        help=f"Print the full {MIDI_DATA_BASE64_KEY} value instead of its length.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    targets = expand_targets(args.paths)
    if not targets:
        parser.error("No files matched the provided paths/patterns.")

    results: list[CafMetadata] = []
    for path in targets:
        logger.debug("reading %s", path)
        results.append(inspect_file(path))

    if args.json:
        print(format_json(results, args.keys, args.show_midi))
    else:
        print(format_table(results, args.keys, args.show_midi))

    return 0 if all(r.recognised for r in results) else 1


if __name__ == "__main__":
    raise SystemExit(main())

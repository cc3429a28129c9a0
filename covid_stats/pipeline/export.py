"""Stats JSON export."""

from __future__ import annotations

from pathlib import Path

from covid_stats.common.fs import write_json


def write_granularity_outputs(
    output: list[dict],
    out_dir: Path,
    *,
    pretty_filename: str = "stats_pretty.json",
    compact_filename: str = "stats.json",
) -> tuple[Path, Path]:
    """Write the same assembled structure twice: indented and compact.

    Key order is the assembled order, so nothing is re-sorted here.
    """
    pretty_path = out_dir / pretty_filename
    compact_path = out_dir / compact_filename
    write_json(pretty_path, output, sort_keys=False)
    write_json(compact_path, output, compact=True, sort_keys=False)
    return pretty_path, compact_path

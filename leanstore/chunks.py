"""
Backup splitting
Cuts a LeanCloud backup export (one JSON object per line) into JSON array
files small enough to be re-imported one after another.
"""

import logging
import math
from pathlib import Path
from typing import List, Union

from .exceptions import ValidationError

logger = logging.getLogger(__name__)

DEFAULT_PARTS = 3


def read_object_lines(path: Union[str, Path]) -> List[str]:
    """Lines of the backup that hold a JSON object; anything else is skipped"""
    text = Path(path).read_text(encoding="utf-8")
    return [line for line in text.splitlines() if line.startswith("{")]


def partition(lines: List[str], parts: int) -> List[List[str]]:
    """
    Split lines into contiguous groups of ``ceil(len(lines) / parts)``

    The last group may be shorter, and fewer than ``parts`` groups come back
    when the lines do not divide evenly.
    """
    if parts < 1:
        raise ValidationError("parts must be at least 1")
    if not lines:
        return []
    size = math.ceil(len(lines) / parts)
    return [lines[start:start + size] for start in range(0, len(lines), size)]


def split_backup(
    path: Union[str, Path],
    parts: int = DEFAULT_PARTS,
    output_dir: Union[str, Path] = "."
) -> List[Path]:
    """
    Write ``chunk.<index>.json`` files for a backup file

    Args:
        path: Backup file
        parts: Number of chunks to aim for
        output_dir: Directory the chunk files go to

    Returns:
        Paths of the written files, in index order
    """
    lines = read_object_lines(path)
    groups = partition(lines, parts)
    logger.debug("%d objects in %s, %d chunks", len(lines), path, len(groups))

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for index, group in enumerate(groups):
        target = output_dir / f"chunk.{index}.json"
        target.write_text(f"[{','.join(group)}]", encoding="utf-8")
        logger.info("wrote %s (%d objects)", target, len(group))
        written.append(target)
    return written

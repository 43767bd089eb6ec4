"""All-or-nothing writer for the ``names``, ``pred`` and ``true`` files.

Each file holds one entry per line in corpus order.  All three are first
written to temporary files in the output directory and only renamed into
place once every one of them is complete, so a failed run leaves either
the previous files or nothing -- never a mismatched set.
"""

from __future__ import annotations

import os
import tempfile
from collections.abc import Sequence
from pathlib import Path

import structlog

logger = structlog.get_logger()

OUTPUT_FILES = ("names", "pred", "true")


def write_outputs(
    output_dir: Path,
    names: Sequence[str],
    pred: Sequence[object],
    true: Sequence[object],
) -> dict[str, Path]:
    """Write the three aligned output files.

    Raises:
        ValueError: If the three sequences differ in length or an entry
            contains a newline.  Nothing is written in that case.
    """
    if not len(names) == len(pred) == len(true):
        raise ValueError(
            f"Output columns differ in length: names={len(names)}, "
            f"pred={len(pred)}, true={len(true)}"
        )

    contents: dict[str, str] = {}
    for filename, column in zip(OUTPUT_FILES, (names, pred, true)):
        values = [str(v) for v in column]
        if any("\n" in v or "\r" in v for v in values):
            raise ValueError(f"Entry in {filename!r} contains a line break")
        contents[filename] = "".join(f"{v}\n" for v in values)

    output_dir.mkdir(parents=True, exist_ok=True)
    staged: dict[str, Path] = {}
    final: dict[str, Path] = {}
    try:
        for filename, text in contents.items():
            fd, tmp = tempfile.mkstemp(prefix=f".{filename}.", dir=output_dir)
            staged[filename] = Path(tmp)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
        for filename, tmp_path in staged.items():
            target = output_dir / filename
            os.replace(tmp_path, target)
            final[filename] = target
    except BaseException:
        for tmp_path in staged.values():
            tmp_path.unlink(missing_ok=True)
        # a half-renamed set would be misaligned with the older files
        if final:
            remove_outputs(output_dir)
        raise

    logger.info("outputs_written", directory=str(output_dir), documents=len(names))
    return final


def remove_outputs(output_dir: Path) -> None:
    """Delete any existing output files from ``output_dir``."""
    for filename in OUTPUT_FILES:
        (output_dir / filename).unlink(missing_ok=True)


def read_output(path: Path) -> list[str]:
    """Read one output file back as a list of entries."""
    return path.read_text(encoding="utf-8").splitlines()

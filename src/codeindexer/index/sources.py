"""Element stream I/O.

Upstream collaborators (source parsers, assembly readers, project walkers)
hand elements over as JSON Lines: one ``element_to_dict`` record per line.
A record that cannot be turned into an element is logged and skipped; the
rest of the stream still loads.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from codeindexer.core.errors import InvalidElementError
from codeindexer.index.models import Element, element_from_dict, element_to_dict

logger = structlog.get_logger()


@dataclass
class StreamReadResult:
    """Elements loaded from a stream, plus the number of skipped records."""

    elements: list[Element] = field(default_factory=list)
    skipped: int = 0


def read_element_stream(path: Path | str) -> StreamReadResult:
    """Load every valid element record from a JSON Lines file.

    Blank lines are ignored. Records that are not valid JSON or do not
    describe a valid element are skipped after logging
    ``element_record_skipped``.

    Raises:
        InvalidElementError: If ``path`` is empty.
        FileNotFoundError: If the file does not exist.
    """
    if not path:
        raise InvalidElementError.missing_argument("path")
    stream_path = Path(path)

    result = StreamReadResult()
    with stream_path.open(encoding="utf-8") as f:
        for line_number, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                element = element_from_dict(json.loads(line))
            except json.JSONDecodeError as e:
                logger.warning(
                    "element_record_skipped",
                    path=str(stream_path),
                    line=line_number,
                    error=f"invalid JSON: {e.msg}",
                )
                result.skipped += 1
                continue
            except InvalidElementError as e:
                logger.warning(
                    "element_record_skipped",
                    path=str(stream_path),
                    line=line_number,
                    error=e.message,
                )
                result.skipped += 1
                continue
            result.elements.append(element)

    logger.info(
        "element_stream_loaded",
        path=str(stream_path),
        count=len(result.elements),
        skipped=result.skipped,
    )
    return result


def write_element_stream(path: Path | str, elements: Iterable[Element]) -> int:
    """Write elements as JSON Lines, replacing the file. Returns the count."""
    if not path:
        raise InvalidElementError.missing_argument("path")
    stream_path = Path(path)
    stream_path.parent.mkdir(parents=True, exist_ok=True)

    count = 0
    with stream_path.open("w", encoding="utf-8") as f:
        for element in elements:
            f.write(json.dumps(element_to_dict(element)))
            f.write("\n")
            count += 1
    return count

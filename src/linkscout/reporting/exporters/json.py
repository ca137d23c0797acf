"""JSON exporter for discovered links.

This module writes output records either as one JSON document with run
metadata or as JSON Lines (one record per line), with custom encoding for
datetime, enum and path values.
"""

import json
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, Optional

from linkscout import __version__
from linkscout.core.exceptions import ExportError


class RecordJSONEncoder(json.JSONEncoder):
    """Custom JSON encoder for output records.

    Handles serialization of datetime, Enum, and Path objects.
    """

    def default(self, o):
        """Encode special types to JSON-serializable formats.

        Args:
            o: Object to encode

        Returns:
            JSON-serializable representation
        """
        if isinstance(o, datetime):
            return o.isoformat()

        if isinstance(o, Enum):
            return o.value

        if isinstance(o, Path):
            return str(o)

        return super().default(o)


class JSONExporter:
    """Export output records to JSON or JSON Lines.

    Paths ending in ``.jsonl`` or ``.ndjson`` are written as JSON Lines;
    anything else gets a single document.
    """

    LINES_SUFFIXES = {".jsonl", ".ndjson"}

    def export(
        self,
        records: Iterable[dict[str, Any]],
        output_path: Path,
        *,
        source_urls: Optional[list[str]] = None,
    ) -> int:
        """Write records to output_path.

        Args:
            records: Output records, in emission order
            output_path: Destination file
            source_urls: Crawled page URLs, recorded in document metadata

        Returns:
            Number of records written

        Raises:
            ExportError: If the file cannot be written or a record cannot be encoded
        """
        records = list(records)
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)

            with output_path.open("w", encoding="utf-8") as f:
                if output_path.suffix.lower() in self.LINES_SUFFIXES:
                    for record in records:
                        f.write(json.dumps(record, cls=RecordJSONEncoder, ensure_ascii=False))
                        f.write("\n")
                else:
                    data = {
                        "metadata": {
                            "generated_at": datetime.now(timezone.utc),
                            "generator": "linkscout",
                            "version": __version__,
                            "source_urls": source_urls or [],
                            "total_records": len(records),
                        },
                        "records": records,
                    }
                    json.dump(
                        data,
                        f,
                        cls=RecordJSONEncoder,
                        indent=2,
                        ensure_ascii=False,
                    )

        except (OSError, TypeError, ValueError) as e:
            raise ExportError(f"Failed to export records: {e}") from e

        return len(records)

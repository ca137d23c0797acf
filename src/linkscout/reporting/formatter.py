"""Output records for processed links.

Two shapes are supported:
- grouped: one record holding both link lists and their counts
- split: one record per link, tagged with its type

Split output never comes back empty: a page without surviving links yields
a single informational record so every input produces at least one output.
"""

from typing import Any, Optional, Union

from linkscout.core.constants import EMPTY_RESULT_MESSAGE, LinkType, OutputFormat
from linkscout.core.exceptions import ValidationError
from linkscout.core.models import Link, LinkCollection


OutputRecord = dict[str, Any]


def parse_output_format(mode: Union[OutputFormat, str]) -> OutputFormat:
    """Parse an output format name.

    Raises:
        ValidationError: If mode is not ``grouped`` or ``split``
    """
    if isinstance(mode, OutputFormat):
        return mode
    try:
        return OutputFormat(str(mode).strip().lower())
    except ValueError:
        raise ValidationError(
            f"Unsupported output format '{mode}'. Use 'grouped' or 'split'."
        ) from None


def _link_record(link: Link, include_metadata: bool) -> OutputRecord:
    record: OutputRecord = {"href": link.href}
    if include_metadata:
        record["text"] = link.text or ""
        record["title"] = link.title or ""
    return record


def format_grouped(
    processed: LinkCollection,
    include_metadata: bool,
    source_url: Optional[str] = None,
) -> list[OutputRecord]:
    internal = [_link_record(link, include_metadata) for link in processed.internal]
    external = [_link_record(link, include_metadata) for link in processed.external]

    record: OutputRecord = {}
    if source_url is not None:
        record["url"] = source_url
    record.update({
        "success": True,
        "internalLinks": internal,
        "externalLinks": external,
        "totalInternal": len(internal),
        "totalExternal": len(external),
        "totalLinks": len(internal) + len(external),
    })
    return [record]


def format_split(
    processed: LinkCollection,
    include_metadata: bool,
    source_url: Optional[str] = None,
) -> list[OutputRecord]:
    records: list[OutputRecord] = []

    for link_type in (LinkType.INTERNAL, LinkType.EXTERNAL):
        for link in processed.get(link_type):
            record: OutputRecord = {
                "url": link.href,
                "type": link_type.value,
                "sourceUrl": source_url,
            }
            if include_metadata:
                record["text"] = link.text or ""
                record["title"] = link.title or ""
            records.append(record)

    if not records:
        records.append({
            "sourceUrl": source_url,
            "message": EMPTY_RESULT_MESSAGE,
            "internalCount": 0,
            "externalCount": 0,
        })

    return records


def format_links(
    processed: LinkCollection,
    mode: Union[OutputFormat, str] = OutputFormat.GROUPED,
    include_metadata: bool = True,
    source_url: Optional[str] = None,
) -> list[OutputRecord]:
    """Render processed links as output records.

    Args:
        processed: Filtered (and deduplicated) links
        mode: ``grouped`` or ``split``
        include_metadata: Add anchor text and title to every link
        source_url: URL of the crawled page

    Returns:
        Output records; never empty
    """
    if parse_output_format(mode) == OutputFormat.SPLIT:
        return format_split(processed, include_metadata, source_url)
    return format_grouped(processed, include_metadata, source_url)

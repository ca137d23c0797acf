"""Filtering and deduplication over a page's link collection."""

import logging
from typing import Iterable, Optional, Union

from linkscout.core.constants import LinkType
from linkscout.core.exceptions import LinkTypeSelectionError
from linkscout.core.models import FilterCriteria, LinkCollection
from linkscout.filters.classifier import LinkClassifier
from linkscout.filters.deduper import LinkDeduper


logger = logging.getLogger(__name__)


def parse_link_types(wanted_types: Iterable[Union[LinkType, str]]) -> set[LinkType]:
    """Parse requested link types.

    Args:
        wanted_types: LinkType members or their string values

    Returns:
        Set of requested LinkType members

    Raises:
        LinkTypeSelectionError: If nothing is selected or a name is unknown
    """
    selected: set[LinkType] = set()
    for value in wanted_types or ():
        if isinstance(value, LinkType):
            selected.add(value)
            continue
        try:
            selected.add(LinkType(str(value).strip().lower()))
        except ValueError:
            raise LinkTypeSelectionError(
                f"Unknown link type '{value}'. Must be one of: internal, external"
            ) from None

    if not selected:
        raise LinkTypeSelectionError("At least one link type must be selected.")

    return selected


class LinkSetProcessor:
    """Classify and deduplicate the internal and external links of a page.

    The internal/external partition comes from the crawl server and is
    never recomputed here.
    """

    def __init__(self, criteria: FilterCriteria, *, deduper: Optional[LinkDeduper] = None):
        self.classifier = LinkClassifier(criteria)
        self.deduper = deduper or LinkDeduper()

    def process(
        self,
        collection: LinkCollection,
        wanted_types: Iterable[Union[LinkType, str]],
        *,
        dedupe: bool = True,
    ) -> LinkCollection:
        """Filter (and optionally deduplicate) the requested link types.

        Args:
            collection: Links reported for the page
            wanted_types: Link types to keep; unrequested types come back empty
            dedupe: Drop later links sharing a canonical key with an earlier one

        Returns:
            New LinkCollection; ``collection`` is left untouched

        Raises:
            LinkTypeSelectionError: If no link type is requested
        """
        selected = parse_link_types(wanted_types)

        results = {}
        for link_type in LinkType:
            if link_type not in selected:
                results[link_type] = ()
                continue

            links = collection.get(link_type)
            survivors = self.classifier.filter(links)
            filtered_count = len(survivors)
            if dedupe:
                if logger.isEnabledFor(logging.DEBUG):
                    for key, members in self.deduper.get_duplicates(survivors).items():
                        logger.debug(f"{link_type.value}: {len(members)} links share key {key}")
                survivors = self.deduper.deduplicate(survivors)

            logger.debug(
                f"{link_type.value}: {len(links)} links, {filtered_count} after filters, "
                f"{len(survivors)} after dedup"
            )
            results[link_type] = tuple(survivors)

        return LinkCollection(
            internal=results[LinkType.INTERNAL],
            external=results[LinkType.EXTERNAL],
        )


def process(
    collection: LinkCollection,
    wanted_types: Iterable[Union[LinkType, str]],
    criteria: FilterCriteria,
    dedupe: bool,
) -> LinkCollection:
    """Filter and deduplicate collection; see LinkSetProcessor.process."""
    return LinkSetProcessor(criteria).process(collection, wanted_types, dedupe=dedupe)

"""Assembly of search requests from optional query features."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from solrbridge.core.exceptions import InvalidQueryError
from solrbridge.core.models import DEFAULT_HANDLER, FacetOptions, HighlightOptions, QuerySpec
from solrbridge.core.types import SortOrder

logger = logging.getLogger(__name__)

DEFAULT_HIGHLIGHT_SNIPPETS = 1
DEFAULT_FACET_LIMIT = 8
DEFAULT_FACET_MIN_COUNT = 1


def build_query(
    raw_query: str,
    handler: str | None = DEFAULT_HANDLER,
    *,
    highlight_field: str | None = None,
    highlight_snippets: int = DEFAULT_HIGHLIGHT_SNIPPETS,
    facet_fields: Iterable[str] | None = None,
    facet_limit: int = DEFAULT_FACET_LIMIT,
    facet_min_count: int = DEFAULT_FACET_MIN_COUNT,
    extra_params: Mapping[str, str] | None = None,
    filter_queries: Iterable[str] | None = None,
    sort_fields: Mapping[str, SortOrder | str] | None = None,
) -> QuerySpec:
    """
    Build a search request.

    Every feature is independently optional. Highlighting is only enabled
    when a highlight field is given and faceting only when at least one
    facet field is given; their other settings are ignored otherwise.

    Args:
        raw_query: The q parameter, e.g. "title:solr" or "*:*"
        handler: Request handler; "/select" unless a custom one is needed
        highlight_field: Field to highlight (enables highlighting)
        highlight_snippets: Number of highlight snippets per result
        facet_fields: Fields to facet on, in order (enables faceting)
        facet_limit: Maximum facet values per field
        facet_min_count: Minimum count for a facet value to be returned
        extra_params: Additional request parameters, copied verbatim
        filter_queries: Filter queries (fq), in order
        sort_fields: Field name to "asc"/"desc", in order

    Returns:
        The assembled query spec

    Raises:
        InvalidQueryError: If any individual input is malformed
    """
    if not raw_query:
        raise InvalidQueryError("Query string must not be empty")
    _reject_bare_string("filter_queries", filter_queries)
    _reject_bare_string("facet_fields", facet_fields)

    return QuerySpec(
        raw_query=raw_query,
        handler=handler or DEFAULT_HANDLER,
        highlight=_build_highlight(highlight_field, highlight_snippets),
        facet=_build_facet(facet_fields, facet_limit, facet_min_count),
        extra_params={str(k): str(v) for k, v in (extra_params or {}).items()},
        filter_queries=tuple(filter_queries or ()),
        sort_fields=_build_sort(sort_fields),
    )


def _reject_bare_string(name: str, value: object) -> None:
    # A str is iterable, but would be split into one entry per character
    if isinstance(value, (str, bytes)):
        raise InvalidQueryError(
            f"{name} must be a collection of strings, not a single string",
            details={name: value},
        )


def _build_highlight(field: str | None, snippets: int) -> HighlightOptions | None:
    if field is None:
        logger.debug("Highlighting is disabled for this query...")
        return None

    if snippets < 1:
        raise InvalidQueryError(
            f"Highlight snippet count must be at least 1, got {snippets}",
            details={"highlight_snippets": snippets},
        )
    return HighlightOptions(field=field, snippet_count=snippets)


def _build_facet(
    fields: Iterable[str] | None,
    limit: int,
    min_count: int,
) -> FacetOptions | None:
    facet_fields = tuple(fields or ())
    if not facet_fields:
        logger.debug("Faceting is disabled for this query...")
        return None
    return FacetOptions(fields=facet_fields, limit=limit, min_count=min_count)


def _build_sort(sort_fields: Mapping[str, SortOrder | str] | None) -> dict[str, SortOrder]:
    """Normalize sort orders, rejecting anything but asc/desc."""
    result: dict[str, SortOrder] = {}
    for name, order in (sort_fields or {}).items():
        result[name] = parse_sort_order(order, field=name)
    return result


def parse_sort_order(order: SortOrder | str, *, field: str | None = None) -> SortOrder:
    """
    Parse a sort order token.

    Args:
        order: A SortOrder or the case-insensitive token "asc" / "desc"
        field: Field the order applies to (for error reporting)

    Raises:
        InvalidQueryError: If the token is not a valid sort order
    """
    if isinstance(order, SortOrder):
        return order
    try:
        return SortOrder(str(order).strip().lower())
    except ValueError as e:
        raise InvalidQueryError(
            f"Unsupported sort order {order!r}, expected 'asc' or 'desc'",
            details={"field": field, "order": order},
        ) from e

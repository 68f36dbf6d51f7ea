"""Domain models for Solr requests and responses."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .types import SortOrder

DEFAULT_SERVER_URL = "http://localhost:8983/solr"
DEFAULT_HANDLER = "/select"


class ConnectionConfig(BaseModel):
    """Where and how to connect to a Solr server."""

    model_config = ConfigDict(frozen=True)

    server_address: str = Field(
        default=DEFAULT_SERVER_URL,
        description="Solr base URL, including the core when not using the default one",
    )
    username: str | None = Field(default=None, description="Basic auth username")
    password: str | None = Field(default=None, description="Basic auth password", repr=False)

    @property
    def has_credentials(self) -> bool:
        """Both username and password are non-empty."""
        return bool(self.username) and bool(self.password)

    @property
    def has_partial_credentials(self) -> bool:
        """Exactly one of username and password is non-empty."""
        return bool(self.username) != bool(self.password)


# ============================================================================
# Query request
# ============================================================================


class HighlightOptions(BaseModel):
    """Highlighting settings for a query."""

    model_config = ConfigDict(frozen=True)

    field: str = Field(..., description="Field to highlight (hl.fl)")
    snippet_count: int = Field(default=1, ge=1, description="Snippets per result (hl.snippets)")


class FacetOptions(BaseModel):
    """Faceting settings for a query."""

    model_config = ConfigDict(frozen=True)

    fields: tuple[str, ...] = Field(..., min_length=1, description="Facet fields, in order")
    limit: int = Field(default=8, description="facet.limit")
    min_count: int = Field(default=1, description="facet.mincount")


class QuerySpec(BaseModel):
    """A fully assembled search request."""

    model_config = ConfigDict(frozen=True)

    raw_query: str = Field(..., description="The q parameter")
    handler: str = Field(default=DEFAULT_HANDLER, description="Request handler")
    highlight: HighlightOptions | None = None
    facet: FacetOptions | None = None
    extra_params: dict[str, str] = Field(default_factory=dict)
    filter_queries: tuple[str, ...] = ()
    sort_fields: dict[str, SortOrder] = Field(default_factory=dict)

    @property
    def request_path(self) -> str:
        """Path the request is sent to, relative to the server URL."""
        if self.handler.startswith("/"):
            return self.handler
        return DEFAULT_HANDLER

    def to_params(self) -> list[tuple[str, str]]:
        """
        Render the query as ordered Solr request parameters.

        Extra params replace any earlier parameter of the same name; filter
        queries and sort fields are appended to whatever is already set.
        """
        params: dict[str, list[str]] = {"q": [self.raw_query]}

        # Named (non-path) handlers are selected with qt
        if self.handler != DEFAULT_HANDLER and not self.handler.startswith("/"):
            params["qt"] = [self.handler]

        if self.highlight is not None:
            params["hl"] = ["true"]
            params["hl.snippets"] = [str(self.highlight.snippet_count)]
            params["hl.fl"] = [self.highlight.field]

        if self.facet is not None:
            params["facet"] = ["true"]
            params["facet.limit"] = [str(self.facet.limit)]
            params["facet.mincount"] = [str(self.facet.min_count)]
            params["facet.field"] = list(self.facet.fields)

        for name, value in self.extra_params.items():
            params[name] = [value]

        if self.filter_queries:
            params.setdefault("fq", []).extend(self.filter_queries)

        if self.sort_fields:
            clauses = [f"{name} {order.value}" for name, order in self.sort_fields.items()]
            existing = params.get("sort")
            if existing:
                clauses.insert(0, existing[0])
            params["sort"] = [",".join(clauses)]

        return [(name, value) for name, values in params.items() for value in values]


# ============================================================================
# Responses
# ============================================================================


class FacetCount(BaseModel):
    """A single facet value and its count."""

    model_config = ConfigDict(frozen=True)

    value: str
    count: int


class QueryResult(BaseModel):
    """Parsed response of a search request."""

    documents: list[dict[str, Any]] = Field(default_factory=list)
    num_found: int = 0
    start: int = 0
    max_score: float | None = None
    facet_fields: dict[str, list[FacetCount]] = Field(default_factory=dict)
    highlighting: dict[str, dict[str, list[str]]] = Field(default_factory=dict)
    q_time: int = 0
    raw: dict[str, Any] = Field(default_factory=dict, repr=False)

    @classmethod
    def from_response(cls, data: dict[str, Any]) -> QueryResult:
        """Build a result from a Solr JSON response body."""
        header = data.get("responseHeader") or {}
        response = data.get("response") or {}
        facet_counts = data.get("facet_counts") or {}

        return cls(
            documents=list(response.get("docs") or []),
            num_found=response.get("numFound", 0),
            start=response.get("start", 0),
            max_score=response.get("maxScore"),
            facet_fields={
                name: _parse_facet_values(values)
                for name, values in (facet_counts.get("facet_fields") or {}).items()
            },
            highlighting=data.get("highlighting") or {},
            q_time=header.get("QTime", 0),
            raw=data,
        )

    @property
    def has_facets(self) -> bool:
        return bool(self.facet_fields)

    @property
    def has_highlighting(self) -> bool:
        return bool(self.highlighting)


class UpdateOutcome(BaseModel):
    """Engine response to an update (add, commit, delete or rollback)."""

    status: int = 0
    q_time: int = 0
    performed: bool = True
    raw: dict[str, Any] = Field(default_factory=dict, repr=False)

    @property
    def success(self) -> bool:
        """Whether the engine performed the update and reported status 0."""
        return self.performed and self.status == 0

    @classmethod
    def empty(cls) -> UpdateOutcome:
        """Outcome for a request that had nothing to send."""
        return cls(performed=False)

    @classmethod
    def from_response(cls, data: dict[str, Any]) -> UpdateOutcome:
        """Build an outcome from a Solr JSON response body."""
        header = data.get("responseHeader") or {}
        return cls(
            status=header.get("status", 0),
            q_time=header.get("QTime", 0),
            raw=data,
        )


def _parse_facet_values(values: Any) -> list[FacetCount]:
    """
    Parse facet values in any ``json.nl`` layout.

    Handles flat ``[v1, c1, v2, c2]`` (the default), map ``{v1: c1}``,
    arrarr ``[[v1, c1], ...]`` and arrmap ``[{v1: c1}, ...]``.

    Raises:
        ValueError: If the values match none of these layouts
    """
    if isinstance(values, dict):
        pairs = list(values.items())
    elif isinstance(values, list) and values and isinstance(values[0], list):
        pairs = [tuple(pair) for pair in values]
    elif isinstance(values, list) and values and isinstance(values[0], dict):
        pairs = [item for entry in values for item in entry.items()]
    elif isinstance(values, list):
        pairs = list(zip(values[::2], values[1::2]))
    else:
        raise ValueError(f"Unsupported facet values: {values!r}")

    counts = []
    for pair in pairs:
        if len(pair) != 2:
            raise ValueError(f"Malformed facet entry: {pair!r}")
        value, count = pair
        counts.append(FacetCount(value=str(value), count=int(count)))
    return counts

"""XFiles - Capabilities Declaration.

Describes what a transport supports and how (pushed down to the store vs
emulated client-side). The query validator and the repository descriptor
table are both derived from a Capabilities instance.
"""

from dataclasses import dataclass, field
from typing import Any, Literal

from prismic_cr.core.prismic.api import MAX_PAGE_SIZE

# =============================================================================
# CAPABILITY FEATURE DESCRIPTORS
# =============================================================================


@dataclass(frozen=True, slots=True)
class FeatureSupport:
    """Describes support level for a feature.

    Attributes:
        supported: Whether the feature is available at all.
        pushdown: Whether the feature is executed natively by the store.
            If False but supported=True, the transport emulates it.
    """

    supported: bool = False
    pushdown: bool = False

    def to_dict(self) -> dict[str, bool]:
        return {"supported": self.supported, "pushdown": self.pushdown}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FeatureSupport":
        return cls(
            supported=data.get("supported", False),
            pushdown=data.get("pushdown", False),
        )


@dataclass(frozen=True, slots=True)
class FilterCapability:
    """Describes constraint capabilities.

    Attributes:
        supported: Whether constraints are available.
        pushdown: Whether constraints are evaluated by the store.
        ops: Supported operator names (see ``babel_fish.validation.constraint_op``).
    """

    supported: bool = False
    pushdown: bool = False
    ops: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "supported": self.supported,
            "pushdown": self.pushdown,
            "ops": list(self.ops),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FilterCapability":
        ops = data.get("ops", [])
        return cls(
            supported=data.get("supported", False),
            pushdown=data.get("pushdown", False),
            ops=tuple(ops) if isinstance(ops, (list, tuple)) else tuple(),
        )


#: Pagination mode type
type PaginationMode = Literal["offset", "page"]


@dataclass(frozen=True, slots=True)
class PaginationCapability:
    """Describes pagination capabilities.

    Attributes:
        supported: Whether limit/offset are available.
        pushdown: Whether pagination is executed by the store.
        mode: Native pagination mode.
        max_limit: Maximum allowed limit value (None = no maximum).
        max_page_size: Largest page the store returns in one request.
    """

    supported: bool = False
    pushdown: bool = False
    mode: PaginationMode = "offset"
    max_limit: int | None = None
    max_page_size: int | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "supported": self.supported,
            "pushdown": self.pushdown,
            "mode": self.mode,
        }
        if self.max_limit is not None:
            result["max_limit"] = self.max_limit
        if self.max_page_size is not None:
            result["max_page_size"] = self.max_page_size
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PaginationCapability":
        return cls(
            supported=data.get("supported", False),
            pushdown=data.get("pushdown", False),
            mode=data.get("mode", "offset"),
            max_limit=data.get("max_limit"),
            max_page_size=data.get("max_page_size"),
        )


@dataclass(frozen=True, slots=True)
class NativeCapability:
    """Describes native escape hatch capabilities.

    Attributes:
        supported: Whether native() is available.
        kinds: Available native handle kinds.
    """

    supported: bool = False
    kinds: tuple[str, ...] = field(default_factory=lambda: ("api",))

    def to_dict(self) -> dict[str, Any]:
        return {"supported": self.supported, "kinds": list(self.kinds)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NativeCapability":
        kinds = data.get("kinds", ["api"])
        return cls(
            supported=data.get("supported", False),
            kinds=tuple(kinds) if isinstance(kinds, (list, tuple)) else ("api",),
        )


@dataclass(frozen=True, slots=True)
class FullTextCapability:
    """Describes full-text search capabilities.

    Attributes:
        supported: Whether CONTAINS constraints are available.
        scoring: Whether relevance scores are exposed.
    """

    supported: bool = False
    scoring: bool = False

    def to_dict(self) -> dict[str, bool]:
        return {"supported": self.supported, "scoring": self.scoring}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FullTextCapability":
        return cls(
            supported=data.get("supported", False),
            scoring=data.get("scoring", False),
        )


# =============================================================================
# MAIN CAPABILITIES CLASS
# =============================================================================


@dataclass(frozen=True, slots=True)
class Capabilities:
    """Complete capability declaration for a transport.

    Attributes:
        query: Whether queries are accepted at all.
        projection: Column selection.
        filter: Constraints with supported operators.
        order_by: Orderings.
        pagination: Limit/offset with mode and limits.
        native: Native escape hatch.
        joins: Multi-selector queries.
        full_text: Full-text constraints and scoring.
        write: Whether content can be written.
        versioning: Whether versions are exposed.
        locking: Whether nodes can be locked.
        transactions: Whether transactions are available.
        extra: Additional transport-specific capabilities.
    """

    query: FeatureSupport = field(default_factory=FeatureSupport)
    projection: FeatureSupport = field(default_factory=FeatureSupport)
    filter: FilterCapability = field(default_factory=FilterCapability)
    order_by: FeatureSupport = field(default_factory=FeatureSupport)
    pagination: PaginationCapability = field(default_factory=PaginationCapability)
    native: NativeCapability = field(default_factory=NativeCapability)
    joins: FeatureSupport = field(default_factory=FeatureSupport)
    full_text: FullTextCapability = field(default_factory=FullTextCapability)
    write: bool = False
    versioning: bool = False
    locking: bool = False
    transactions: bool = False
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert capabilities to dictionary representation."""
        result: dict[str, Any] = {
            "query": self.query.to_dict(),
            "projection": self.projection.to_dict(),
            "filter": self.filter.to_dict(),
            "order_by": self.order_by.to_dict(),
            "pagination": self.pagination.to_dict(),
            "native": self.native.to_dict(),
            "joins": self.joins.to_dict(),
            "full_text": self.full_text.to_dict(),
            "write": self.write,
            "versioning": self.versioning,
            "locking": self.locking,
            "transactions": self.transactions,
        }
        if self.extra:
            result["extra"] = self.extra
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Capabilities":
        """Create Capabilities from dictionary representation."""
        return cls(
            query=FeatureSupport.from_dict(data.get("query", {})),
            projection=FeatureSupport.from_dict(data.get("projection", {})),
            filter=FilterCapability.from_dict(data.get("filter", {})),
            order_by=FeatureSupport.from_dict(data.get("order_by", {})),
            pagination=PaginationCapability.from_dict(data.get("pagination", {})),
            native=NativeCapability.from_dict(data.get("native", {})),
            joins=FeatureSupport.from_dict(data.get("joins", {})),
            full_text=FullTextCapability.from_dict(data.get("full_text", {})),
            write=data.get("write", False),
            versioning=data.get("versioning", False),
            locking=data.get("locking", False),
            transactions=data.get("transactions", False),
            extra=data.get("extra", {}),
        )

    def supports_operator(self, op: str) -> bool:
        """Check if a constraint operator is supported."""
        return self.filter.supported and op in self.filter.ops

    def supports_native_kind(self, kind: str) -> bool:
        """Check if a native handle kind is supported."""
        return self.native.supported and kind in self.native.kinds


# =============================================================================
# FACTORY HELPERS
# =============================================================================

#: Constraint operators the predicate translator can express.
PRISMIC_FILTER_OPS: tuple[str, ...] = (
    "eq",
    "ne",
    "lt",
    "lte",
    "gt",
    "gte",
    "like",
    "exists",
    "fulltext",
    "and",
    "or",
    "not",
)


def prismic_capabilities() -> Capabilities:
    """Capabilities of the Prismic transport.

    Read-only; single-selector queries; constraints, orderings and
    pagination pushed down to the store; no relevance scores.
    """
    return Capabilities(
        query=FeatureSupport(supported=True, pushdown=True),
        projection=FeatureSupport(supported=True, pushdown=False),
        filter=FilterCapability(supported=True, pushdown=True, ops=PRISMIC_FILTER_OPS),
        order_by=FeatureSupport(supported=True, pushdown=True),
        pagination=PaginationCapability(
            supported=True,
            pushdown=True,
            mode="page",
            max_limit=None,
            max_page_size=MAX_PAGE_SIZE,
        ),
        native=NativeCapability(supported=True, kinds=("api", "ref", "http")),
        joins=FeatureSupport(supported=False),
        full_text=FullTextCapability(supported=True, scoring=False),
        write=False,
        versioning=False,
        locking=False,
        transactions=False,
    )


__all__ = [
    # Feature descriptors
    "FeatureSupport",
    "FilterCapability",
    "PaginationCapability",
    "NativeCapability",
    "FullTextCapability",
    # Main class
    "Capabilities",
    # Type aliases
    "PaginationMode",
    # Factory helpers
    "PRISMIC_FILTER_OPS",
    "prismic_capabilities",
]

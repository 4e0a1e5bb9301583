"""Retrieval scopes — which stored fragments a similarity search considers."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class AllForOwner:
    """Every fragment owned by a user."""

    owner_id: str


@dataclass(frozen=True)
class SubsetOfResources:
    """Only fragments of the listed resources, still restricted to the owner."""

    owner_id: str
    resource_ids: tuple[str, ...] = field(default_factory=tuple)


SearchScope = AllForOwner | SubsetOfResources


def scope_for(owner_id: str, resource_ids: list[str] | None = None) -> SearchScope:
    """Build the scope for an optional resource filter.

    An empty or missing list means the owner's whole library.
    """
    if resource_ids:
        return SubsetOfResources(owner_id=owner_id, resource_ids=tuple(resource_ids))
    return AllForOwner(owner_id=owner_id)

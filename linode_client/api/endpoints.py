"""Endpoint policies: how each resource family derives its request path."""

from __future__ import annotations

from dataclasses import dataclass

from ..exceptions import EndpointResolutionError

_PARENT = "{parent_id}"


@dataclass(frozen=True)
class EndpointPolicy:
    """Collection path template for one resource family.

    Nested families carry a ``{parent_id}`` placeholder, e.g.
    ``nodebalancers/{parent_id}/configs``.
    """

    name: str
    template: str

    @property
    def nested(self) -> bool:
        return _PARENT in self.template

    def resolve(self, parent_id: int | None = None) -> str:
        """Return the collection path. Raises EndpointResolutionError on misuse."""
        if not self.template:
            raise EndpointResolutionError(f"No endpoint template configured for {self.name}")
        if self.nested and parent_id is None:
            raise EndpointResolutionError(f"{self.name} is nested and requires a parent id")
        if not self.nested and parent_id is not None:
            raise EndpointResolutionError(f"{self.name} is not nested but got parent id {parent_id}")
        try:
            return self.template.format(parent_id=parent_id).strip("/")
        except (KeyError, IndexError, ValueError) as exc:
            raise EndpointResolutionError(f"Bad endpoint template for {self.name}: {self.template!r}") from exc

    def resolve_item(self, item_id: int, parent_id: int | None = None) -> str:
        return f"{self.resolve(parent_id)}/{item_id}"


NODEBALANCERS = EndpointPolicy("nodebalancers", "nodebalancers")
NODEBALANCER_CONFIGS = EndpointPolicy("nodebalancer_configs", "nodebalancers/{parent_id}/configs")
INSTANCE_CONFIGS = EndpointPolicy("instance_configs", "linode/instances/{parent_id}/configs")

"""REST plumbing: transport, endpoint policies, pagination and the generic resource client."""

from .endpoints import INSTANCE_CONFIGS, NODEBALANCER_CONFIGS, NODEBALANCERS, EndpointPolicy
from .pagination import ListOptions, PagedResponse
from .resource_client import ResourceClient
from .transport import Transport

__all__ = [
    "EndpointPolicy",
    "INSTANCE_CONFIGS",
    "ListOptions",
    "NODEBALANCERS",
    "NODEBALANCER_CONFIGS",
    "PagedResponse",
    "ResourceClient",
    "Transport",
]

"""Resource records and create/update option sets, one module per family."""

from .base import OptionSet, Record, parse_date
from .instance_config import (
    InstanceConfig,
    InstanceConfigCreateOptions,
    InstanceConfigDevice,
    InstanceConfigDeviceMap,
    InstanceConfigHelpers,
    InstanceConfigUpdateOptions,
)
from .nodebalancer import (
    NodeBalancer,
    NodeBalancerCreateOptions,
    NodeBalancerTransfer,
    NodeBalancerUpdateOptions,
)
from .nodebalancer_config import (
    NodeBalancerConfig,
    NodeBalancerConfigCreateOptions,
    NodeBalancerConfigUpdateOptions,
    NodeBalancerNodeStatus,
)

__all__ = [
    "InstanceConfig",
    "InstanceConfigCreateOptions",
    "InstanceConfigDevice",
    "InstanceConfigDeviceMap",
    "InstanceConfigHelpers",
    "InstanceConfigUpdateOptions",
    "NodeBalancer",
    "NodeBalancerConfig",
    "NodeBalancerConfigCreateOptions",
    "NodeBalancerConfigUpdateOptions",
    "NodeBalancerCreateOptions",
    "NodeBalancerNodeStatus",
    "NodeBalancerTransfer",
    "NodeBalancerUpdateOptions",
    "OptionSet",
    "Record",
    "parse_date",
]

"""Top-level client bundling one ResourceClient per resource family."""

from __future__ import annotations

import threading

import requests

from .api.endpoints import INSTANCE_CONFIGS, NODEBALANCER_CONFIGS, NODEBALANCERS
from .api.resource_client import ResourceClient
from .api.transport import Transport
from .config import APIConfig
from .resources import InstanceConfig, InstanceConfigUpdateOptions, NodeBalancer, NodeBalancerConfig

FAMILIES = ("nodebalancers", "nodebalancer_configs", "instance_configs")


class LinodeClient:
    """Entry point for callers. Built from an explicit, immutable APIConfig.

    Usage:
        with LinodeClient(config) as client:
            nb = client.nodebalancers.get(123)
            configs = client.nodebalancer_configs.list(parent_id=nb.id)
    """

    def __init__(self, config: APIConfig, session: requests.Session | None = None):
        self.config = config
        self._transport = Transport(config, session)
        page_size = config.page_size
        self.nodebalancers: ResourceClient[NodeBalancer] = ResourceClient(
            self._transport, NodeBalancer, NODEBALANCERS, page_size,
        )
        self.nodebalancer_configs: ResourceClient[NodeBalancerConfig] = ResourceClient(
            self._transport, NodeBalancerConfig, NODEBALANCER_CONFIGS, page_size,
        )
        self.instance_configs: ResourceClient[InstanceConfig] = ResourceClient(
            self._transport, InstanceConfig, INSTANCE_CONFIGS, page_size,
        )

    def family(self, name: str) -> ResourceClient:
        """Look up a resource client by family name (see FAMILIES)."""
        if name not in FAMILIES:
            raise KeyError(f"Unknown resource family: {name}")
        return getattr(self, name)

    def rename_instance_config(self, linode_id: int, config_id: int, label: str,
                               cancel: threading.Event | None = None) -> InstanceConfig:
        return self.instance_configs.update(
            config_id, InstanceConfigUpdateOptions(label=label), parent_id=linode_id, cancel=cancel,
        )

    def close(self) -> None:
        self._transport.close()

    def __enter__(self) -> LinodeClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False

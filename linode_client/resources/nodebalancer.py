"""NodeBalancer records and option sets."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .base import JSONMapped, OptionSet, Record, computed, nested, raw_date


@dataclass(frozen=True)
class NodeBalancerTransfer(JSONMapped):
    """Transfer used this month, in MB."""

    total: float | None = None
    out: float | None = None
    in_: float | None = field(default=None, metadata={"json": "in"})


@dataclass(frozen=True)
class NodeBalancerCreateOptions(OptionSet):
    label: str | None = None
    region: str | None = None
    client_conn_throttle: int | None = None  # 0-20, 0 disables throttling


@dataclass(frozen=True)
class NodeBalancerUpdateOptions(OptionSet):
    label: str | None = None
    client_conn_throttle: int | None = None


@dataclass
class NodeBalancer(Record):
    DATE_FIELDS = ("created", "updated")

    label: str | None = None
    region: str | None = None
    hostname: str | None = None
    ipv4: str | None = None
    ipv6: str | None = None
    client_conn_throttle: int | None = None
    transfer: NodeBalancerTransfer | None = nested(NodeBalancerTransfer)
    created_str: str | None = raw_date("created")
    updated_str: str | None = raw_date("updated")
    created: datetime | None = computed()
    updated: datetime | None = computed()

    def get_create_options(self) -> NodeBalancerCreateOptions:
        return NodeBalancerCreateOptions(
            label=self.label,
            region=self.region,
            client_conn_throttle=self.client_conn_throttle,
        )

    def get_update_options(self) -> NodeBalancerUpdateOptions:
        return NodeBalancerUpdateOptions(
            label=self.label,
            client_conn_throttle=self.client_conn_throttle,
        )

"""NodeBalancer config records (one per listening port) and option sets."""

from __future__ import annotations

from dataclasses import dataclass

from .base import JSONMapped, OptionSet, Record, nested


@dataclass(frozen=True)
class NodeBalancerNodeStatus(JSONMapped):
    up: int | None = None
    down: int | None = None


@dataclass(frozen=True)
class NodeBalancerConfigCreateOptions(OptionSet):
    port: int | None = None
    protocol: str | None = None  # http, https, tcp
    algorithm: str | None = None  # roundrobin, leastconn, source
    stickiness: str | None = None  # none, table, http_cookie
    check: str | None = None  # none, connection, http, http_body
    check_interval: int | None = None
    check_timeout: int | None = None
    check_attempts: int | None = None
    check_path: str | None = None
    check_body: str | None = None
    check_passive: bool | None = None
    cipher_suite: str | None = None  # recommended, legacy
    ssl_cert: str | None = None
    ssl_key: str | None = None


@dataclass(frozen=True)
class NodeBalancerConfigUpdateOptions(NodeBalancerConfigCreateOptions):
    pass


@dataclass
class NodeBalancerConfig(Record):
    nodebalancer_id: int | None = None
    port: int | None = None
    protocol: str | None = None
    algorithm: str | None = None
    stickiness: str | None = None
    check: str | None = None
    check_interval: int | None = None
    check_timeout: int | None = None
    check_attempts: int | None = None
    check_path: str | None = None
    check_body: str | None = None
    check_passive: bool | None = None
    cipher_suite: str | None = None
    ssl_commonname: str | None = None
    ssl_fingerprint: str | None = None
    nodes_status: NodeBalancerNodeStatus | None = nested(NodeBalancerNodeStatus)

    def _settings(self) -> dict:
        return dict(
            port=self.port,
            protocol=self.protocol,
            algorithm=self.algorithm,
            stickiness=self.stickiness,
            check=self.check,
            check_interval=self.check_interval,
            check_timeout=self.check_timeout,
            check_attempts=self.check_attempts,
            check_path=self.check_path,
            check_body=self.check_body,
            check_passive=self.check_passive,
            cipher_suite=self.cipher_suite,
        )

    def get_create_options(self) -> NodeBalancerConfigCreateOptions:
        return NodeBalancerConfigCreateOptions(**self._settings())

    def get_update_options(self) -> NodeBalancerConfigUpdateOptions:
        return NodeBalancerConfigUpdateOptions(**self._settings())

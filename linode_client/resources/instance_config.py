"""Linode instance boot configurations and option sets."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .base import JSONMapped, OptionSet, Record, computed, nested, raw_date


@dataclass(frozen=True)
class InstanceConfigDevice(JSONMapped):
    """A disk or a volume attached to a device slot. Only one is set."""

    disk_id: int | None = None
    volume_id: int | None = None


@dataclass(frozen=True)
class InstanceConfigDeviceMap(JSONMapped):
    sda: InstanceConfigDevice | None = nested(InstanceConfigDevice)
    sdb: InstanceConfigDevice | None = nested(InstanceConfigDevice)
    sdc: InstanceConfigDevice | None = nested(InstanceConfigDevice)
    sdd: InstanceConfigDevice | None = nested(InstanceConfigDevice)
    sde: InstanceConfigDevice | None = nested(InstanceConfigDevice)
    sdf: InstanceConfigDevice | None = nested(InstanceConfigDevice)
    sdg: InstanceConfigDevice | None = nested(InstanceConfigDevice)
    sdh: InstanceConfigDevice | None = nested(InstanceConfigDevice)


@dataclass(frozen=True)
class InstanceConfigHelpers(JSONMapped):
    updatedb_disabled: bool | None = None
    distro: bool | None = None
    modules_dep: bool | None = None
    network: bool | None = None
    devtmpfs_automount: bool | None = None


@dataclass(frozen=True)
class InstanceConfigCreateOptions(OptionSet):
    label: str | None = None
    comments: str | None = None
    devices: InstanceConfigDeviceMap | None = nested(InstanceConfigDeviceMap)
    helpers: InstanceConfigHelpers | None = nested(InstanceConfigHelpers)
    memory_limit: int | None = None
    kernel: str | None = None
    init_rd: int | None = None
    root_device: str | None = None
    run_level: str | None = None  # default, single, binbash
    virt_mode: str | None = None  # paravirt, fullvirt


@dataclass(frozen=True)
class InstanceConfigUpdateOptions(InstanceConfigCreateOptions):
    pass


@dataclass
class InstanceConfig(Record):
    DATE_FIELDS = ("created", "updated")

    label: str | None = None
    comments: str | None = None
    devices: InstanceConfigDeviceMap | None = nested(InstanceConfigDeviceMap)
    helpers: InstanceConfigHelpers | None = nested(InstanceConfigHelpers)
    memory_limit: int | None = None
    kernel: str | None = None
    init_rd: int | None = None
    root_device: str | None = None
    run_level: str | None = None
    virt_mode: str | None = None
    created_str: str | None = raw_date("created")
    updated_str: str | None = raw_date("updated")
    created: datetime | None = computed()
    updated: datetime | None = computed()

    def _settings(self) -> dict:
        return dict(
            label=self.label,
            comments=self.comments,
            devices=self.devices,
            helpers=self.helpers,
            memory_limit=self.memory_limit,
            kernel=self.kernel,
            init_rd=self.init_rd,
            root_device=self.root_device,
            run_level=self.run_level,
            virt_mode=self.virt_mode,
        )

    def get_create_options(self) -> InstanceConfigCreateOptions:
        return InstanceConfigCreateOptions(**self._settings())

    def get_update_options(self) -> InstanceConfigUpdateOptions:
        return InstanceConfigUpdateOptions(**self._settings())

"""Network interfaces and per-interface bandwidth."""

from __future__ import annotations

import socket
import sys
import time
from dataclasses import dataclass, field
from typing import Sequence

import psutil

from .netstats import NetStats, get_stats
from .settings import MonitorConfig

DEFAULT_MAC = "00:00:00:00:00:00"
_UINT64 = 2**64
_IP_FAMILIES = (socket.AF_INET, socket.AF_INET6)


@dataclass
class Address:
    ip: str = field(default="", metadata={"json": "ip"})


@dataclass
class NetworkDevice:
    name: str = field(default="", metadata={"json": "name"})
    addresses: list = field(default_factory=list, metadata={"json": "addresses"})
    mac: str = field(default="", metadata={"json": "mac"})
    up: bool = field(default=False, metadata={"json": "up"})


@dataclass
class NetworkDeviceBandwidth:
    name: str = field(default="", metadata={"json": "name"})
    rx: int = field(default=0, metadata={"json": "rx"})
    tx: int = field(default=0, metadata={"json": "tx"})


def bandwidth_between(
    before: Sequence[NetStats], after: Sequence[NetStats]
) -> list[NetworkDeviceBandwidth]:
    """Pair two samples by position and return the bytes moved in between.

    Counters are unsigned 64-bit values, so a counter that went backwards wraps.
    """
    if len(after) < len(before):
        raise ValueError("second sample has fewer interfaces than the first")
    return [
        NetworkDeviceBandwidth(
            name=first.name,
            rx=(second.rx_bytes - first.rx_bytes) % _UINT64,
            tx=(second.tx_bytes - first.tx_bytes) % _UINT64,
        )
        for first, second in zip(before, after)
    ]


def _plain_ip(address: str) -> str:
    return address.split("/")[0].split("%")[0]


def check_network_devices(config: MonitorConfig) -> list[NetworkDevice]:
    """List every interface with its addresses, hardware address and state."""
    if not config.available("networkDevices"):
        return []
    stats = psutil.net_if_stats()
    devices = []
    for name, entries in psutil.net_if_addrs().items():
        mac = next(
            (e.address for e in entries if e.family == psutil.AF_LINK and e.address),
            DEFAULT_MAC,
        )
        addresses = [
            Address(ip=_plain_ip(e.address))
            for e in entries
            if e.family in _IP_FAMILIES
        ]
        stat = stats.get(name)
        devices.append(
            NetworkDevice(
                name=name,
                addresses=addresses,
                mac=mac,
                up=bool(stat is not None and stat.isup),
            )
        )
    return devices


def _windows_totals() -> list[NetworkDeviceBandwidth]:
    stats = psutil.net_if_stats()
    counters = psutil.net_io_counters(pernic=True)
    return [
        NetworkDeviceBandwidth(name=name, rx=io.bytes_recv, tx=io.bytes_sent)
        for name, io in sorted(counters.items())
        if name in stats and stats[name].isup and "Pseudo" not in name
    ]


def check_network_bandwidth(
    config: MonitorConfig, interval: float = 1.0
) -> list[NetworkDeviceBandwidth]:
    """Measure bytes received and sent by each interface over ``interval`` seconds."""
    if not config.available("networkBandwidth"):
        return []
    if sys.platform == "win32":
        return _windows_totals()
    before = get_stats()
    time.sleep(interval)
    after = get_stats()
    return bandwidth_between(before, after)
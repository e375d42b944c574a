"""Per-interface byte counters read from ``/proc/net/dev``."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

PROC_NET_DEV = "/proc/net/dev"
_MAX_UINT64 = 2**64 - 1


@dataclass
class NetStats:
    """Total received and transmitted bytes of one interface."""

    name: str
    rx_bytes: int
    tx_bytes: int


def _parse_uint(text: str) -> int:
    if not text.isascii() or not text.isdigit():
        raise ValueError(text)
    value = int(text)
    if value > _MAX_UINT64:
        raise ValueError(text)
    return value


def collect_network_stats(lines: Iterable[str]) -> list[NetStats]:
    """Parse lines in ``/proc/net/dev`` format, skipping headers and loopback."""
    networks = []
    for line in lines:
        name, sep, rest = line.partition(":")
        if not sep:
            continue
        fields = rest.split()
        if len(fields) < 16:
            continue
        name = name.strip()
        if name == "lo":
            continue
        try:
            rx_bytes = _parse_uint(fields[0])
        except ValueError:
            raise ValueError(f"failed to parse rxBytes of {name}") from None
        try:
            tx_bytes = _parse_uint(fields[8])
        except ValueError:
            raise ValueError(f"failed to parse txBytes of {name}") from None
        networks.append(NetStats(name=name, rx_bytes=rx_bytes, tx_bytes=tx_bytes))
    return networks


def get_stats() -> list[NetStats]:
    """Read the current counters of every non-loopback interface."""
    with open(PROC_NET_DEV, encoding="utf-8") as handle:
        return collect_network_stats(handle)
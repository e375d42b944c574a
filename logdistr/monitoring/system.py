"""Snapshots of CPU, memory, disk, host and process information."""

from __future__ import annotations

import os
import platform
import re
import subprocess
import sys
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

import psutil

from .settings import MonitorConfig

_SAMPLE_SECONDS = 0.5
_MODEL_NAME = re.compile(r".*model name.*")
_ARCH_NAMES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
}


@dataclass
class CPU:
    name: str = field(default="", metadata={"json": "name"})
    total: int = field(default=0, metadata={"json": "total"})
    usage: float = field(default=0.0, metadata={"json": "usage"})
    usage_per_core: list = field(
        default_factory=list, metadata={"json": "usagePerCore"}
    )


@dataclass
class RAM:
    free: int = field(default=0, metadata={"json": "free"})
    total: int = field(default=0, metadata={"json": "total"})
    usage: int = field(default=0, metadata={"json": "usage"})


@dataclass
class Disk:
    mountpoint: str = field(default="", metadata={"json": "mountPoint"})
    free: int = field(default=0, metadata={"json": "free"})
    size: int = field(default=0, metadata={"json": "size"})
    used: int = field(default=0, metadata={"json": "used"})
    percent: float = field(default=0.0, metadata={"json": "percent"})


@dataclass
class HostInfo:
    name: str = field(default="", metadata={"json": "name"})
    os: str = field(default="", metadata={"json": "os"})
    arch: str = field(default="", metadata={"json": "arch"})
    platform: str = field(default="", metadata={"json": "platform"})
    uptime: int = field(default=0, metadata={"json": "uptime"})


@dataclass
class Process:
    pid: int = field(default=0, metadata={"json": "pid"})
    name: str = field(default="", metadata={"json": "name"})


def parse_cpu_name(text: str) -> str:
    """Extract the processor name from ``/proc/cpuinfo`` contents."""
    match = _MODEL_NAME.search(text)
    line = match.group(0) if match else ""
    return line.strip("model name").strip().strip(" :")


def _cpu_name() -> str:
    if sys.platform == "win32":
        out = subprocess.run(
            ["wmic", "cpu", "get", "name"],
            capture_output=True,
            text=True,
            check=True,
        ).stdout
        return out.strip("Name").strip()
    with open("/proc/cpuinfo", encoding="utf-8", errors="replace") as handle:
        return parse_cpu_name(handle.read())


def check_cpu(config: MonitorConfig) -> CPU:
    """Sample CPU usage over half a second, overall and per core."""
    if not config.available("cpu"):
        return CPU()
    with ThreadPoolExecutor(max_workers=2) as pool:
        overall = pool.submit(psutil.cpu_percent, _SAMPLE_SECONDS, False)
        per_core = pool.submit(psutil.cpu_percent, _SAMPLE_SECONDS, True)
        name = _cpu_name()
        return CPU(
            name=name,
            total=os.cpu_count() or 0,
            usage=float(overall.result()),
            usage_per_core=[float(v) for v in per_core.result()],
        )


def check_ram(config: MonitorConfig) -> RAM:
    """Report total, used and free virtual memory in bytes."""
    if not config.available("ram"):
        return RAM()
    memory = psutil.virtual_memory()
    return RAM(
        free=memory.total - memory.used,
        total=memory.total,
        usage=memory.used,
    )


def check_disks(config: MonitorConfig) -> list[Disk]:
    """Report usage of every physical partition."""
    if not config.available("disks"):
        return []
    disks = []
    for partition in psutil.disk_partitions(all=False):
        try:
            usage = psutil.disk_usage(partition.mountpoint)
        except OSError:
            disks.append(Disk(mountpoint=partition.mountpoint))
            continue
        disks.append(
            Disk(
                mountpoint=partition.mountpoint,
                free=usage.free,
                size=usage.total,
                used=usage.used,
                percent=float(usage.percent),
            )
        )
    return disks


def _os_name() -> str:
    if sys.platform == "win32":
        return "windows"
    if sys.platform.startswith("linux"):
        return "linux"
    return sys.platform


def _arch() -> str:
    machine = platform.machine()
    return _ARCH_NAMES.get(machine.lower(), machine.lower())


def _platform() -> str:
    if sys.platform.startswith("linux"):
        try:
            release = platform.freedesktop_os_release()
        except OSError:
            return f"{platform.system().lower()} {platform.release()}"
        return f"{release.get('ID', '')} {release.get('VERSION_ID', '')}"
    if sys.platform == "darwin":
        return f"darwin {platform.mac_ver()[0]}"
    return f"{platform.system()} {platform.version()}"


def check_host_info(config: MonitorConfig) -> HostInfo:
    """Report host name, operating system, architecture, platform and uptime."""
    if not config.available("hostInfo"):
        return HostInfo()
    return HostInfo(
        name=platform.node(),
        os=_os_name(),
        arch=_arch(),
        platform=_platform(),
        uptime=max(0, int(time.time() - psutil.boot_time())),
    )


def check_processes(config: MonitorConfig) -> list[Process]:
    """List running processes by pid and executable name."""
    if not config.available("processes"):
        return []
    return [
        Process(pid=proc.info["pid"], name=proc.info.get("name") or "")
        for proc in psutil.process_iter(["pid", "name"])
    ]
import os

from logdistr.monitoring.settings import MonitorConfig
from logdistr.monitoring.system import (
    CPU,
    RAM,
    HostInfo,
    check_cpu,
    check_disks,
    check_host_info,
    check_processes,
    check_ram,
    parse_cpu_name,
)

ENABLED = MonitorConfig(
    values={"hostInfo": True, "ram": True, "disks": True, "processes": True}
)

CPUINFO = (
    "processor\t: 0\n"
    "vendor_id\t: GenuineIntel\n"
    "model name\t: Intel(R) Core(TM) i7-8550U CPU @ 1.80GHz\n"
    "cpu MHz\t\t: 1992.000\n"
)


def test_parse_cpu_name_from_cpuinfo():
    assert parse_cpu_name(CPUINFO) == "Intel(R) Core(TM) i7-8550U CPU @ 1.80GHz"


def test_parse_cpu_name_without_model_line():
    assert parse_cpu_name("processor\t: 0\n") == ""


def test_disabled_modules_return_empty_values():
    config = MonitorConfig(values={"cpu": False})
    assert check_cpu(config) == CPU()
    assert check_ram(config) == RAM()
    assert check_host_info(config) == HostInfo()
    assert check_disks(config) == []
    assert check_processes(config) == []


def test_ram_free_plus_used_is_total():
    ram = check_ram(ENABLED)
    assert ram.total > 0
    assert ram.free + ram.usage == ram.total


def test_processes_include_current_process():
    pids = {proc.pid for proc in check_processes(ENABLED)}
    assert os.getpid() in pids


def test_disk_usage_is_consistent():
    for disk in check_disks(ENABLED):
        assert disk.used <= disk.size
        assert 0.0 <= disk.percent <= 100.0


def test_host_info_values():
    info = check_host_info(ENABLED)
    assert info.uptime >= 0
    assert info.os in {"linux", "darwin", "windows"} or info.os.startswith(
        ("freebsd", "openbsd", "netbsd")
    )
    assert info.arch == info.arch.lower()
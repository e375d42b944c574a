from unittest import mock

import pytest

from logdistr.monitoring.netstats import NetStats, collect_network_stats, get_stats

SAMPLE = (
    "Inter-|   Receive                                                |  Transmit\n"
    " face |bytes    packets errs drop fifo frame compressed multicast|bytes    packets errs drop fifo colls carrier compressed\n"
    "    lo:  100 1 0 0 0 0 0 0 100 1 0 0 0 0 0 0\n"
    "  eth0: 5000 40 0 0 0 0 0 0 7000 50 0 0 0 0 0 0\n"
    " wlan0: 12 2 0 0 0 0 0 0 34 3 0 0 0 0 0 0\n"
)


def test_collect_parses_interfaces_and_skips_loopback():
    stats = collect_network_stats(SAMPLE.splitlines())
    assert stats == [
        NetStats(name="eth0", rx_bytes=5000, tx_bytes=7000),
        NetStats(name="wlan0", rx_bytes=12, tx_bytes=34),
    ]


def test_short_lines_are_skipped():
    lines = ["eth1: 1 2 3", "eth2: 9 0 0 0 0 0 0 0 8 0 0 0 0 0 0 0"]
    stats = collect_network_stats(lines)
    assert [s.name for s in stats] == ["eth2"]


def test_invalid_rx_raises():
    line = "eth0: abc 0 0 0 0 0 0 0 1 0 0 0 0 0 0 0"
    with pytest.raises(ValueError, match="failed to parse rxBytes of eth0"):
        collect_network_stats([line])


def test_invalid_tx_raises():
    line = "eth0: 1 0 0 0 0 0 0 0 -5 0 0 0 0 0 0 0"
    with pytest.raises(ValueError, match="failed to parse txBytes of eth0"):
        collect_network_stats([line])


def test_empty_input_gives_no_stats():
    assert collect_network_stats([]) == []


def test_get_stats_reads_proc_file():
    with mock.patch("builtins.open", mock.mock_open(read_data=SAMPLE)):
        stats = get_stats()
    assert stats == collect_network_stats(SAMPLE.splitlines())
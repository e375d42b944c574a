import pytest

from logdistr.monitoring.settings import CONFIG_NAME, DEFAULT_CONFIG, MonitorConfig

MODULES = [
    "hostInfo",
    "cpu",
    "ram",
    "disks",
    "networkDevices",
    "networkBandwidth",
    "processes",
]


def test_load_creates_default_file(tmp_path, capsys):
    config = MonitorConfig.load(tmp_path)
    assert (tmp_path / CONFIG_NAME).read_text() == DEFAULT_CONFIG
    assert "Config.yml doesn't exists" in capsys.readouterr().out
    assert config.values["port"] == 3000


def test_default_modules_all_available(tmp_path):
    config = MonitorConfig.load(tmp_path)
    assert all(config.available(module) for module in MODULES)


def test_existing_file_is_not_overwritten(tmp_path):
    (tmp_path / CONFIG_NAME).write_text("cpu: false\nram: true\n")
    config = MonitorConfig.load(tmp_path)
    assert config.available("cpu") is False
    assert config.available("ram") is True
    assert (tmp_path / CONFIG_NAME).read_text() == "cpu: false\nram: true\n"


def test_non_boolean_value_is_not_available(tmp_path):
    (tmp_path / CONFIG_NAME).write_text('cpu: "true"\nram: 1\n')
    config = MonitorConfig.load(tmp_path)
    assert config.available("cpu") is False
    assert config.available("ram") is False


def test_missing_module_is_not_available():
    assert MonitorConfig().available("disks") is False


def test_keys_are_case_insensitive():
    config = MonitorConfig(values={"HOSTINFO": True})
    assert config.available("hostInfo") is True


def test_invalid_yaml_raises(tmp_path):
    (tmp_path / CONFIG_NAME).write_text("cpu: [unclosed\n")
    with pytest.raises(RuntimeError, match="config file error"):
        MonitorConfig.load(tmp_path)


def test_non_mapping_document_raises(tmp_path):
    (tmp_path / CONFIG_NAME).write_text("- cpu\n- ram\n")
    with pytest.raises(RuntimeError):
        MonitorConfig.load(tmp_path)
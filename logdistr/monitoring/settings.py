"""Monitoring configuration read from ``config.yml``."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

import yaml

CONFIG_NAME = "config.yml"
DEFAULT_CONFIG = """# api server port
port: 3000

#available modules
hostInfo: true
cpu: true
ram: true
disks: true
networkDevices: true
networkBandwidth: true
processes: true"""


@dataclass
class MonitorConfig:
    """Settings for the monitoring server; keys are case-insensitive."""

    values: dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.values = {str(key).lower(): value for key, value in self.values.items()}

    @classmethod
    def load(cls, directory=None) -> "MonitorConfig":
        """Read ``config.yml`` from ``directory``, creating it with defaults if missing."""
        directory = os.getcwd() if directory is None else os.fspath(directory)
        path = os.path.join(directory, CONFIG_NAME)
        if not os.path.exists(path):
            print("Config.yml doesn't exists")
            print("Creating config.yml with default values")
            try:
                with open(path, "w", encoding="utf-8") as handle:
                    handle.write(DEFAULT_CONFIG)
            except OSError as exc:
                print(exc)
                return cls()
        try:
            with open(path, encoding="utf-8") as handle:
                data = yaml.safe_load(handle)
        except (OSError, yaml.YAMLError) as exc:
            raise RuntimeError("config file error") from exc
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise RuntimeError("config file error")
        return cls(values=data)

    def available(self, module: str) -> bool:
        """Whether ``module`` is switched on with a boolean ``true``."""
        value = self.values.get(module.lower())
        return value if isinstance(value, bool) else False
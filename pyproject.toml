[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "logdistr"
version = "0.1.0"
description = "A segmented, append-only commit log with access control, a JSON HTTP log server and a small host-monitoring server"
requires-python = ">=3.10"
keywords = [
    "commit-log",
    "append-only",
    "segment",
    "mmap",
    "monitoring",
    "acl",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Distributed Computing",
    "Topic :: System :: Monitoring",
    "Topic :: Database :: Database Engines/Servers",
]
dependencies = [
    "pyyaml",
    "psutil",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
logdistr-server = "logdistr.httpapi:main"
logdistr-monitor = "logdistr.monitoring.web:main"

[tool.hatch.build.targets.wheel]
packages = ["logdistr"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true

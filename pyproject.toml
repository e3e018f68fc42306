[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "linuxcheck"
version = "0.1.0"
description = "Readers for Linux system metrics used by monitoring checks: CPU, memory, interrupts, files and containers."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "monitoring",
    "nagios",
    "linux",
    "procfs",
    "sysfs",
    "cpu",
    "memory",
    "containers",
    "docker",
    "podman",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
    "Topic :: System :: Systems Administration",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["linuxcheck"]

[tool.hatch.build.targets.sdist]
include = ["linuxcheck", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true

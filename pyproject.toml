[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kartoffel"
version = "0.1.0"
description = "Core of a small home-automation controller: clock, heap, event log, rules engine, instance table, canvas and RC outlet code words"
requires-python = ">=3.10"
dependencies = []
keywords = ["home-automation", "rules", "event-log", "rc-switch", "clock", "heap"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Home Automation",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["kartoffel"]

[tool.pytest.ini_options]
addopts = "-ra"

[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "vzlogger"
version = "0.1.0"
description = "Smart-meter logger core: OBIS identifiers, readings, aggregation buffers, channels, push to middlewares and configuration parsing"
requires-python = ">=3.10"
dependencies = []
keywords = ["smart meter", "obis", "energy", "logging", "home automation"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Home Automation",
    "Topic :: System :: Monitoring",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["vzlogger"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true

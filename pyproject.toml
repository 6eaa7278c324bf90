[build-system]
requires = ["setuptools>=68"]
build-backend = "setuptools.build_meta"

[project]
name = "systools"
version = "0.1.0"
description = "A Model Context Protocol server exposing desktop system tools: volume, speech, memory, alarms, files, weather and location"
requires-python = ">=3.10"
dependencies = []
keywords = ["mcp", "model-context-protocol", "tools", "server", "json-rpc", "desktop"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
systools = "systools.cli:main"

[tool.setuptools.packages.find]
include = ["systools*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

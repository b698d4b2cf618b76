[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kronos"
version = "0.1.0"
description = "Chunked, git-friendly export and import of agent memory stored in SQLite, with terminal styling and navigation helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["memory", "sync", "sqlite", "manifest", "chunks", "terminal"]
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
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Topic :: Database",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["kronos"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

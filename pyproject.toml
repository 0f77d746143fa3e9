[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "carbonstore"
version = "0.14.0"
description = "Building blocks for a Graphite/Carbon metrics server: points, storage configuration, trigram index and query caching"
requires-python = ">=3.10"
dependencies = []
keywords = ["graphite", "carbon", "whisper", "metrics", "monitoring", "time-series"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["carbonstore"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true

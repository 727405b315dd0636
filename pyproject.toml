[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "agentsesame"
version = "0.1.2"
description = "Terminal-independent building blocks for a fuzzy finder over coding agent session history: key bindings, results layout, sorting, query editing and self-update"
requires-python = ">=3.10"
dependencies = [
    "wcwidth",
]
keywords = ["cli", "tui", "agent", "session", "search", "fuzzy-finder"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["agentsesame"]

[tool.hatch.build.targets.sdist]
include = [
    "agentsesame",
    "tests",
]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true

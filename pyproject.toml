[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "taskqueue-tui"
version = "0.1.0"
description = "Terminal dashboard models for browsing task queue projects, tasks, actions and schedules"
requires-python = ">=3.10"
keywords = ["tui", "terminal", "task-queue", "dashboard", "scheduler"]
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
    "Topic :: Terminals",
]
dependencies = [
    "wcwidth",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["taskqueue_tui"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

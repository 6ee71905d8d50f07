[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "diagrender"
version = "0.1.0"
description = "Render diagnostics with labelled source snippets as graphical, narrated, JSON or debug text."
requires-python = ">=3.10"
dependencies = [
    "wcwidth",
]
keywords = ["diagnostics", "errors", "reporting", "source-snippets", "terminal"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Environment :: Console",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["diagrender"]

[tool.pytest.ini_options]
addopts = "-ra"

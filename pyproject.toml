[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "blockscan"
version = "0.1.0"
description = "Building blocks for block-wise suffix array construction: bitvectors, multi-file bit streams, background readers and writers, merge schedules, paged arrays, gt bitvectors and initial rank ranges."
requires-python = ">=3.10"
dependencies = []
keywords = ["suffix array", "bitvector", "text indexing", "external memory", "stringology"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Text Processing :: Indexing",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["blockscan"]

[tool.pytest.ini_options]
addopts = "-ra"

[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "causaltree"
version = "0.1.0"
description = "Building blocks for causal trees: a split rule, tree bookkeeping, surrogate search and honest estimation"
requires-python = ">=3.10"
dependencies = []
keywords = ["causal inference", "decision tree", "treatment effect", "recursive partitioning", "honest estimation"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Information Analysis",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["causaltree"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

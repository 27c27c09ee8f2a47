[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "unipddl"
version = "0.1.0"
description = "Parser and printer for PDDL planning domains and problem instances"
requires-python = ">=3.10"
dependencies = []
keywords = ["pddl", "planning", "parser", "ai-planning", "temporal-planning"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
unipddl = "unipddl.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["unipddl"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

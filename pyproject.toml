[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "liftsim"
version = "0.1.0"
description = "A networked elevator simulation: a TCP server that runs one elevator and clients that replay ride requests."
requires-python = ">=3.10"
dependencies = []
keywords = ["elevator", "simulation", "tcp", "client-server", "scheduling"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Simulation",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
liftsim-server = "liftsim.server:main"
liftsim-client = "liftsim.client:main"

[tool.hatch.build.targets.wheel]
packages = ["liftsim"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

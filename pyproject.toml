[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "chasm"
version = "0.1.0"
description = "Terminal gladiator arena where small neural-network fighters evolve, with a tycoon mode for buying and selling them"
requires-python = ">=3.10"
dependencies = []
keywords = ["game", "terminal", "curses", "simulation", "neuroevolution", "gladiator"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console :: Curses",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX",
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
chasm = "chasm.tui:main"

[tool.hatch.build.targets.wheel]
packages = ["chasm"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

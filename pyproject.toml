[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rockfall"
version = "1.0.0"
description = "A match-three puzzle game of falling rocks, with missions, levels and special explosions"
requires-python = ">=3.10"
dependencies = [
    "pygame",
]
keywords = ["game", "puzzle", "match-three", "pygame"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: MacOS X",
    "Environment :: Win32 (MS Windows)",
    "Environment :: X11 Applications",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Puzzle Games",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
rockfall = "rockfall.screens:main"

[tool.hatch.build.targets.wheel]
packages = ["rockfall"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

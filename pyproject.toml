[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "livebg"
version = "0.1.0"
description = "Command-line and library client for a live wallpaper daemon's UNIX-socket control protocol"
requires-python = ">=3.10"
dependencies = []
keywords = ["wallpaper", "live wallpaper", "desktop", "x11", "configuration"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Desktop Environment",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
livebg = "livebg.settings:main"

[tool.hatch.build.targets.wheel]
packages = ["livebg"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

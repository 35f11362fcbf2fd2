[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "memedit"
version = "0.1.0"
description = "Scan, filter, watch and edit the memory of a running Linux process"
requires-python = ">=3.10"
dependencies = []
keywords = ["memory", "scanner", "editor", "procfs", "debugging"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Debuggers",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
memedit = "memedit.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["memedit"]

[tool.pytest.ini_options]
addopts = "-ra"

[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "purelzma"
version = "0.1.0"
description = "LZMA and LZMA2 stream coding written in plain Python"
requires-python = ">=3.10"
dependencies = []
keywords = ["lzma", "lzma2", "compression", "range coder", "decompression"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Archiving :: Compression",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["purelzma"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

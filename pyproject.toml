[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dutchauction"
version = "0.1.0"
description = "Slot-based descending-price (Dutch) auction engine with deterministic pricing and settlement records"
requires-python = ">=3.10"
dependencies = []
keywords = ["auction", "dutch-auction", "pricing", "settlement", "escrow"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Financial",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["dutchauction"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

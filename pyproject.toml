[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ledgermatch"
version = "0.1.0"
description = "Reconcile internal system transactions against bank statement CSV files"
requires-python = ">=3.10"
dependencies = []
keywords = ["reconciliation", "accounting", "bank statement", "ledger", "csv"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Financial and Insurance Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Financial :: Accounting",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
ledgermatch = "ledgermatch.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["ledgermatch"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

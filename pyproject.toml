[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "chanlimiter"
version = "0.1.0"
description = "Thread-safe rate limiter that delivers only the most recent item at a fixed pace."
requires-python = ">=3.10"
dependencies = []
keywords = ["rate-limit", "throttle", "threading", "backpressure", "latest-value"]
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
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["chanlimiter"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fluxkit"
version = "1.1.0"
description = "A Flux-style application framework: dispatcher, stores, listeners, action creators and middleware"
requires-python = ">=3.10"
dependencies = []
keywords = ["flux", "dispatcher", "store", "middleware", "actions", "state management"]
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
    "Topic :: Software Development :: Libraries :: Application Frameworks",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["fluxkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

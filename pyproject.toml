[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "jamtool"
version = "0.1.0"
description = "Buildpack packaging helpers: dependency selection, dependency caching, file bundling and metadata formatting"
requires-python = ">=3.11"
dependencies = [
    "tomli-w",
]
keywords = ["buildpack", "cnb", "packaging", "dependencies", "semver", "toml"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["jamtool"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.mypy]
python_version = "3.11"
warn_unused_ignores = true

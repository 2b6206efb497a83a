[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "reviewpad"
version = "0.1.0"
description = "Pull request automation model: review files, linting, workflow evaluation and the Aladino expression building blocks"
requires-python = ">=3.10"
keywords = ["pull-request", "code-review", "automation", "workflow", "linter"]
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
    "Topic :: Software Development :: Quality Assurance",
]
dependencies = [
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
    "freezegun",
]

[tool.hatch.build.targets.wheel]
packages = ["reviewpad"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true

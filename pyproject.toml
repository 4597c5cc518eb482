[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "spanreport"
version = "0.1.0"
description = "Diagnostic data model: labeled source spans, severities, help text and source-context extraction"
requires-python = ">=3.11"
dependencies = []
keywords = ["diagnostics", "errors", "source spans", "error reporting", "labels"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["spanreport"]

[tool.pytest.ini_options]
addopts = "-ra"

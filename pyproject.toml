[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "linkstatus"
version = "0.1.0"
description = "HTTP service that checks whether links are reachable and reports their status as JSON or PDF"
requires-python = ">=3.10"
keywords = ["links", "availability", "link-checker", "http", "pdf", "aiohttp"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Web Environment",
    "Framework :: AsyncIO",
    "Framework :: aiohttp",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: Site Management :: Link Checking",
]
dependencies = [
    "aiohttp",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[project.scripts]
linkstatus = "linkstatus.app:main"

[tool.hatch.build.targets.wheel]
packages = ["linkstatus"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true

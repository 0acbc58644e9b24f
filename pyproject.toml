[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "idnutil"
version = "2.3.8"
description = "Decoding of internationalized domain names, IDNA2008 label checks and table generators"
requires-python = ">=3.10"
dependencies = []
keywords = ["idn", "idna", "idna2008", "punycode", "tr46", "dns", "unicode", "bidi"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: Name Service (DNS)",
    "Topic :: Software Development :: Internationalization",
    "Topic :: Text Processing :: General",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
idnutil-decode = "idnutil.cli:main"
idnutil-tr46gen = "idnutil.tr46gen:main"
idnutil-tablegen = "idnutil.tablegen:main"

[tool.hatch.build.targets.wheel]
packages = ["idnutil"]

[tool.hatch.build.targets.sdist]
include = ["idnutil", "tests", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true

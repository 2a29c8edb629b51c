[build-system]
requires = ["setuptools>=64"]
build-backend = "setuptools.build_meta"

[project]
name = "contestlog"
version = "0.1.0"
description = "Contest logging core for amateur radio: dupe checking, contest rules, CW/RTTY keying, DX cluster spots and prefix lookup"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "ham radio",
    "amateur radio",
    "contest",
    "logging",
    "morse",
    "cw",
    "rtty",
    "baudot",
    "dx cluster",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Ham Radio",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.setuptools.packages.find]
include = ["contestlog*"]

[tool.pytest.ini_options]
addopts = "-ra"

[build-system]
requires = ["setuptools>=61.0"]
build-backend = "setuptools.build_meta"

[project]
name = "runcctl"
version = "0.1.0"
description = "Drive the runc container runtime from Python: build command lines, run them and parse their JSON output."
requires-python = ">=3.10"
dependencies = []
keywords = ["runc", "containers", "oci", "containerd", "shim"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.setuptools.packages.find]
include = ["runcctl*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

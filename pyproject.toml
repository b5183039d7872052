[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "exprunner"
version = "0.1.0"
description = "Load-test and root-cause-analysis experiment runners for services on Kubernetes, with Chaos Mesh network delay injection"
requires-python = ">=3.10"
keywords = [
    "kubernetes",
    "load-testing",
    "chaos-engineering",
    "chaos-mesh",
    "k6",
    "root-cause-analysis",
    "experiments",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Testing",
    "Topic :: System :: Distributed Computing",
]
dependencies = [
    "pyyaml",
    "requests",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["exprunner"]

[tool.hatch.build.targets.sdist]
include = [
    "exprunner",
    "tests",
    "README.md",
]

[tool.pytest.ini_options]
addopts = "-ra"

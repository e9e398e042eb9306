[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pixiu"
version = "0.1.0"
description = "Building blocks for a Kubernetes cloud management service: cluster registry, RBAC data access, audit events and encrypted kubeconfig storage."
requires-python = ">=3.10"
keywords = ["kubernetes", "cluster", "cloud", "rbac", "audit", "kubeconfig", "sqlalchemy"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Clustering",
]
dependencies = [
    "cryptography",
    "sqlalchemy>=2.0",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["pixiu"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true

[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lbcoperator"
version = "1.1.0"
description = "Resource models, IAM policy tooling and cluster helpers for managing an AWS load balancer controller on OpenShift."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "aws",
    "load-balancer",
    "openshift",
    "kubernetes",
    "operator",
    "iam",
    "credentials-request",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
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

[project.scripts]
iamctl = "lbcoperator.iamctl:main"

[tool.hatch.build.targets.wheel]
packages = ["lbcoperator"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true

[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kafkatpl"
version = "0.1.0"
description = "Kafka topic, partition and offset lists, plus timeout and deadline helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["kafka", "offsets", "partitions", "topics", "timeouts"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["kafkatpl"]

[tool.pytest.ini_options]
addopts = "-ra"

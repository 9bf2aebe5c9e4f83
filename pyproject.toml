[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "grpcmw"
version = "0.1.0"
description = "Composable gRPC-style interceptors: chaining, authentication and structured logging"
requires-python = ">=3.10"
dependencies = [
    "protobuf",
]
keywords = ["grpc", "middleware", "interceptor", "logging", "auth"]
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
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["grpcmw"]

[tool.pytest.ini_options]
addopts = "-ra"

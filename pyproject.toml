[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fpsarena"
version = "0.1.0"
description = "Multiplayer maze shooter model with an asyncio UDP game server and text client"
requires-python = ">=3.10"
dependencies = []
keywords = ["game", "fps", "multiplayer", "udp", "maze", "asyncio"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: AsyncIO",
    "Topic :: Games/Entertainment :: First Person Shooters",
]

[project.optional-dependencies]
test = ["pytest", "pytest-asyncio"]

[project.scripts]
fpsarena-server = "fpsarena.server:main"
fpsarena-client = "fpsarena.client:main"

[tool.hatch.build.targets.wheel]
packages = ["fpsarena"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

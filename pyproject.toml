[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tcpchat"
version = "0.1.0"
description = "Small TCP echo and chat servers and clients built on plain sockets"
requires-python = ">=3.10"
dependencies = []
keywords = ["tcp", "sockets", "echo", "chat", "server", "client"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Chat",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
tcpchat-echo-server = "tcpchat.echo_server:main"
tcpchat-echo-client = "tcpchat.echo_client:main"
tcpchat-chat-server = "tcpchat.chat_server:main"
tcpchat-chat-client = "tcpchat.chat_client:main"

[tool.hatch.build.targets.wheel]
packages = ["tcpchat"]

[tool.pytest.ini_options]
addopts = "-ra"

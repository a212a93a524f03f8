[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sh21"
version = "0.1.0"
description = "A small interactive Unix shell with a line editor, pipes and redirections"
requires-python = ">=3.10"
dependencies = []
keywords = ["shell", "command-line", "line-editor", "pipes", "redirection"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: System Shells",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
sh21 = "sh21.shell:main"

[tool.hatch.build.targets.wheel]
packages = ["sh21"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

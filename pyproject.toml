[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rmqtty"
version = "0.1.0"
description = "Terminal based MQTT explorer"
requires-python = ">=3.11"
keywords = ["mqtt", "terminal", "tui", "curses", "explorer", "broker", "iot"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console :: Curses",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet",
    "Topic :: System :: Networking :: Monitoring",
]
dependencies = [
    "paho-mqtt>=2.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
]

[project.scripts]
rmqtty = "rmqtty.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["rmqtty"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.11"
warn_unused_ignores = true
ignore_missing_imports = true

[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "loraigate"
version = "23.31.1"
description = "Building blocks for a LoRa APRS iGate: APRS-IS client, beacon positions, NTP time, task scheduling and a monochrome OLED frame renderer"
requires-python = ">=3.10"
dependencies = []
keywords = ["aprs", "lora", "igate", "ham radio", "aprs-is", "ntp", "oled", "ssd1306"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Telecommunications Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Ham Radio",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["loraigate"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true

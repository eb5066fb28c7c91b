[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "wmkit"
version = "0.1.0"
description = "Tiling window manager helpers: status line runner, IPC client, layout and bar geometry, restart state packing and a lock-screen password prompt"
requires-python = ">=3.10"
dependencies = []
keywords = ["window-manager", "tiling", "status-bar", "ipc", "screen-lock"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: X11 Applications",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Desktop Environment :: Window Managers",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
wmkit-blocks = "wmkit.statusbar:main"
wmkit-msg = "wmkit.ipc:main"

[tool.hatch.build.targets.wheel]
packages = ["wmkit"]

[tool.pytest.ini_options]
addopts = "-ra"

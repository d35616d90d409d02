[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lemonkern"
version = "0.1.0"
description = "Hobby kernel subsystems as a library: heap allocator, scheduler, window manager, software GPU, colour and floppy geometry helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["kernel", "allocator", "scheduler", "framebuffer", "window-manager", "floppy"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Operating System",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["lemonkern"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

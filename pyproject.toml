[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rvsix"
version = "0.1.0"
description = "A model of a small RISC-V teaching Unix: Sv39 page tables, file system images, shell parsing and user utilities"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "operating-system",
    "risc-v",
    "sv39",
    "page-table",
    "file-system",
    "shell",
    "teaching",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Operating System",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
rvsix-mkfs = "rvsix.mkfs:main"
rvsix-grep = "rvsix.grep:main"
rvsix-wc = "rvsix.tools:wc_main"
rvsix-cat = "rvsix.tools:cat_main"
rvsix-echo = "rvsix.tools:echo_main"
rvsix-ls = "rvsix.tools:ls_main"
rvsix-kill = "rvsix.fileops:kill_main"
rvsix-ln = "rvsix.fileops:ln_main"
rvsix-mkdir = "rvsix.fileops:mkdir_main"
rvsix-rm = "rvsix.fileops:rm_main"

[tool.hatch.build.targets.wheel]
packages = ["rvsix"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true

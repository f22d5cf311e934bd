"""A model of a small RISC-V teaching Unix: page tables, file system images, shell parsing and utilities."""

__version__ = "0.1.0"
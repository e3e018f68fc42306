"""Readers for Linux system metrics (CPU, memory, interrupts, files, containers) used by monitoring checks."""

__version__ = "0.1.0"
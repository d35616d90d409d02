"""Hobby-kernel subsystems: heap, scheduler, windows, software GPU, colour and geometry helpers."""

__version__ = "0.1.0"
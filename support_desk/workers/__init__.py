"""Standalone jobs run with ``python -m``."""

"""Evaluator helper modules for the Lox runtime."""

__all__ = [
    "blocks",
    "common",
    "control",
    "expr",
    "fn",
    "helpers",
    "loops",
]

"""
Command-line entry point: prints one password generated with the default
policy and settings.
"""
from __future__ import annotations

import logging

from .generator import generate_password_with_meta
from .strength import score, strength_label


def main() -> None:
    """
    Entry point for `python -m rpgen.cli` or `run_rpgen.py`.
    """
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    result = generate_password_with_meta()
    value = score(result.password)
    print("\n[Random Password Generator]")
    print(f"Generated password: {result.password}")
    print(f"Strength: {strength_label(value)} ({value}/100), {result.rounds} rounds\n")


if __name__ == "__main__":
    main()

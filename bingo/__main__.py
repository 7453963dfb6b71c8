"""
Module entry point for: python -m bingo

Allows running the simulator directly as a module:
    python -m bingo part-one <input_path>
    python -m bingo part-two <input_path>
    python -m bingo solve <input_path> [options]
"""

from .cli import cli


def main():
    cli()


if __name__ == "__main__":
    main()

"""Entry point for `python -m subedit`."""

import sys


def main():
    from subedit.app import run_app
    sys.exit(run_app())


if __name__ == "__main__":
    main()

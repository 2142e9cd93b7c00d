"""Entry point for `python -m mailsafe` and `mailsafe` CLI."""

from mailsafe.cli.app import app


def main() -> None:
    app()


if __name__ == "__main__":
    main()

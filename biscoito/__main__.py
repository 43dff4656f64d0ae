"""Entry point for Biscoito."""

from biscoito.app import BiscoitoApp


def main() -> None:
    app = BiscoitoApp()
    app.run()


if __name__ == "__main__":
    main()

"""Module entrypoint for `python -m credgate`."""

from credgate.main import main


if __name__ == "__main__":  # pragma: no cover - exercised via CLI tests
    main()

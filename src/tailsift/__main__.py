"""Allow running the viewer via `python -m tailsift`."""

from tailsift.cli.main import main

if __name__ == "__main__":
    main()

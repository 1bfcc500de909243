"""Entry point for `python -m i3_scratchpad`."""

from .cli.main import main

if __name__ == "__main__":
    main()

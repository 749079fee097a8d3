"""Run the demo with `python -m chartscale`."""
from chartscale.main import main

if __name__ == "__main__":
    main()

import sys

from .scripts.run_simulation import main


if __name__ == "__main__":
    sys.exit(main())

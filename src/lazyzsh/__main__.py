"""Entry point: python -m lazyzsh"""

from lazyzsh.cli import main

if __name__ == "__main__":
    main()

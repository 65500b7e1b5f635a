"""Package entry point for ``python -m snagbot``.

RULES:
- Delegates straight to snagbot.cli.main()
"""

from snagbot.cli import main

if __name__ == "__main__":
    main()

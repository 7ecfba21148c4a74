"""Allow ``python -m barb_attack``."""

from __future__ import annotations

import sys

from barb_attack.ui.app import main


if __name__ == "__main__":
    sys.exit(main())

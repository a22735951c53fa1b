"""Entry point for `python -m podscope`.

Usage:
    python -m podscope
"""

from __future__ import annotations

import asyncio

from podscope.app import main

asyncio.run(main())

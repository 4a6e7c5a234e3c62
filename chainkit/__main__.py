#!/usr/bin/env python3
"""Entry point for ``python -m chainkit``."""

import sys

from chainkit.cli import main

sys.exit(main())

"""
CurveLab command-line launcher.

Runs the same entry point as the installed ``curvelab`` script, so a
source checkout can be used directly::

    python main.py data.csv --model polynomial --degree 3
"""

from __future__ import annotations

import sys

from curvelab.cli import main

if __name__ == "__main__":
    sys.exit(main())

"""Simple launcher for the airport network statistics.

Runs ``airnet.cli`` from a source checkout, without installing the
package first.
"""

from __future__ import annotations

import sys

from airnet.cli import main

if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))

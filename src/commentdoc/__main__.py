"""python -m commentdoc 진입점"""

import sys

from commentdoc.main import main

if __name__ == "__main__":
    sys.exit(main())

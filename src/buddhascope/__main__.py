import sys

from buddhascope.cli import main

sys.exit(main())

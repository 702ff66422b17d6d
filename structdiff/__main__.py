import sys

from structdiff.cli import main

sys.exit(main())

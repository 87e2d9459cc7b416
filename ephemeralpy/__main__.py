import sys

from ephemeralpy.cli import main

sys.exit(main())

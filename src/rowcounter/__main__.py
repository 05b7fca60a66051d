import sys

from rowcounter.cli import main

sys.exit(main())

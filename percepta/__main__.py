import sys

from percepta.cli import main

sys.exit(main())

import sys

from apictl.cli import main

sys.exit(main())

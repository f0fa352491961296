import sys

from bezmesh.cli import main

sys.exit(main())

import sys

from decmath.cli import main

sys.exit(main())

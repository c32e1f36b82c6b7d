import sys

from windfield.cli import main

sys.exit(main())

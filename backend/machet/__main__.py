import sys

from machet.cli import main

sys.exit(main())

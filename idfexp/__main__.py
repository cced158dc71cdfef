import sys

from idfexp.cli import main

sys.exit(main())

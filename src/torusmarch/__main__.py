import sys

from torusmarch.cli import main

sys.exit(main())

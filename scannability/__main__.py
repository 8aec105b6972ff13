import sys

from scannability.cli import main

sys.exit(main())

import sys

from packwerk_parity.main import main

sys.exit(main())

import sys

from casechart.main import main

sys.exit(main())

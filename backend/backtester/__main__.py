import sys

from backtester.cli import main

sys.exit(main())

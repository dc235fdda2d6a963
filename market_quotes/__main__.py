import sys

from market_quotes.cli import main

sys.exit(main())

import sys

from citecount.cli.main import main

sys.exit(main())

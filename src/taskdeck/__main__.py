import sys

from taskdeck.cli.main import main

sys.exit(main())

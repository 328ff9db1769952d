import sys

from playrunner.cli import main

sys.exit(main())

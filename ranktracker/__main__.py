import sys

from ranktracker.main import main

sys.exit(main())

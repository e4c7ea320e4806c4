import sys

from makeup_comparator.cli import main

sys.exit(main())

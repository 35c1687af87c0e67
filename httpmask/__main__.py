"""Run httpmask: python -m httpmask"""

import sys

from httpmask.cli import main

sys.exit(main())

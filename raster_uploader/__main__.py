"""Allow ``python -m raster_uploader``."""

import sys

from raster_uploader.cli import main

sys.exit(main())

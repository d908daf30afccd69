import sys

from .exporter_server import main

sys.exit(main())

import sys

from movie_catalog.client.cli import main

sys.exit(main())

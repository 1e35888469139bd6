import sys

from utfwidth.cli import main

sys.exit(main())

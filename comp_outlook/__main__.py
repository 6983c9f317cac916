# comp_outlook/__main__.py
import sys

from comp_outlook.cli import main

sys.exit(main())

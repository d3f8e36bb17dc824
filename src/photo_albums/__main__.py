"""
Main module for running photo_albums as a package.
Enables 'python -m photo_albums' execution.
"""

import sys
from .main import main

if __name__ == '__main__':
    sys.exit(main())

"""
Run with: python -m slideeditor
"""
import sys

from slideeditor.main import main

if __name__ == "__main__":
    sys.exit(main())

import sys

from markerglobe.app import main

if __name__ == '__main__':
    sys.exit(main())

"""Allow running as: python -m fedramp_docs"""

import sys

from fedramp_docs.main import main

if __name__ == "__main__":
    sys.exit(main())

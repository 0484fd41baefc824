import sys

from transcript_digest.cli import main

sys.exit(main())

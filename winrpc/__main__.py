import sys

from winrpc.cli import main

sys.exit(main())

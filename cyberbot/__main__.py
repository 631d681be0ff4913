import sys

from cyberbot.main import main

sys.exit(main())

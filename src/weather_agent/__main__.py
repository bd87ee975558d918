import sys

from weather_agent.cli import main

sys.exit(main())

import sys

from check_logstash.cli import main

sys.exit(main())

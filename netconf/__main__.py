import sys

from netconf.posix_net_conf import main

sys.exit(main())

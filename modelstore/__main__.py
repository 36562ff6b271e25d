import sys

from modelstore.main import main

sys.exit(main())

from tstarter.cli import main

raise SystemExit(main())

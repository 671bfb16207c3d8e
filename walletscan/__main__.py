from walletscan.cli import main

raise SystemExit(main())

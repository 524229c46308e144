from trade_intel.cli import main

raise SystemExit(main())

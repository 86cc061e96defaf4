from gospace.modules.cli import main

raise SystemExit(main())

from tshistogram.cli import main

raise SystemExit(main())

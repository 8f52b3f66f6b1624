from create_devx.cli import main

raise SystemExit(main())

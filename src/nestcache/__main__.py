from nestcache.cli import main

raise SystemExit(main())

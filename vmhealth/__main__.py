from vmhealth.cli import main

raise SystemExit(main())

from ai_agents_installer.cli.main import main

raise SystemExit(main())

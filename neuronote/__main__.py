from neuronote.main import main

raise SystemExit(main())

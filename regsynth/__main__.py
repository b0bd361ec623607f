"""Allow ``python -m regsynth``."""

from regsynth.main import main

raise SystemExit(main())

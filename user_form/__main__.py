"""Allow ``python -m user_form``."""

from user_form.cli.main import main

raise SystemExit(main())

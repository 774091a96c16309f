"""Entry point for ``python -m tinypress``."""

from tinypress.cli import main


raise SystemExit(main())

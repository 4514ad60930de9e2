"""Allow ``python -m template_engine``."""

from template_engine.cli import main

main()

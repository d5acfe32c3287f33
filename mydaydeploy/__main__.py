"""Allow ``python -m mydaydeploy``."""

from mydaydeploy.cli import main

main()

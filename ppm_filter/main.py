"""Точка входа в приложение."""
import logging
import os
import sys

from ppm_filter.controllers.cli_controller import CliController


def main() -> None:
    """Настраивает журналирование, выполняет команду и завершает процесс с её кодом."""
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    controller = CliController(program=os.path.basename(sys.argv[0]) or "ppm-filter")
    sys.exit(controller.run(sys.argv[1:]))


if __name__ == "__main__":
    main()

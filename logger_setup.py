# logger_setup.py

import logging
import os

LOGGER_NAME = "accretion_sim"
LOG_ROOT = 'runs'
LOG_FILENAME = 'simulation.log'


def run_log_path(run_id: str, root: str = LOG_ROOT) -> str:
    """Where the log for a given run lives: <root>/<run_id>/simulation.log."""
    return os.path.join(root, run_id, LOG_FILENAME)


def setup_logging(config: dict, root: str = LOG_ROOT) -> str:
    """
    Attaches console and per-run file output to the "accretion_sim" logger.

    Only the application's logger is configured. The root logger is left alone
    so Numba's compiler messages and pygame's banner stay out of the run log.
    Calling this again replaces the handlers of the previous call.

    Data Contract:
    - Inputs:
        - config (dict): The loaded config file. Reads 'run_id' and the
          'logging' section ('level', 'format').
        - root (str): Directory holding one subdirectory per run.
    - Outputs: str - Path of the log file being written.
    - Side Effects: Creates the run directory and opens the log file.
    """
    log_config = config['logging']
    log_file = run_log_path(config['run_id'], root)
    os.makedirs(os.path.dirname(log_file), exist_ok=True)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_config['level'])
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(log_config['format'])
    for handler in (logging.FileHandler(log_file), logging.StreamHandler()):
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return log_file

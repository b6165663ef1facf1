"""
Logging utilities for assembly-statsx.
Console and log.txt output are fed from one queue so worker processes can log too.
"""

import logging
import sys
import multiprocessing
from pathlib import Path
from typing import List, Tuple
from logging.handlers import QueueHandler, QueueListener

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_FILENAME = 'log.txt'

def build_handlers(log_file: Path, verbose: bool = False) -> List[logging.Handler]:
    """
    Create the stdout handler (INFO, DEBUG when verbose) and the log file handler (DEBUG).
    """
    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    console_handler.setFormatter(formatter)

    file_handler = logging.FileHandler(log_file, encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)

    return [console_handler, file_handler]

def route_root_to_queue(queue):
    """
    Replace the root logger's handlers with a single QueueHandler.
    """
    root = logging.getLogger()
    for h in root.handlers[:]:
        root.removeHandler(h)
    root.addHandler(QueueHandler(queue))
    root.setLevel(logging.DEBUG)
    return root

def setup_logging(output_dir: Path, verbose: bool = False) -> Tuple[object, QueueListener]:
    """
    Start queue-based logging for a run, writing output_dir/log.txt.

    :param output_dir: Directory to save log.txt; created if missing.
    :param verbose: Also print DEBUG messages to stdout.
    :return: Tuple of (queue to hand to worker_configurer, running listener to stop at exit).
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    log_file = output_dir / LOG_FILENAME

    # A Manager queue can be pickled into Pool initializers
    queue = multiprocessing.Manager().Queue(-1)
    listener = QueueListener(queue, *build_handlers(log_file, verbose), respect_handler_level=True)
    listener.start()

    route_root_to_queue(queue).info(f"Logging initialized. Log file: {log_file}")
    return queue, listener

def worker_configurer(queue):
    """
    Pool initializer: send a worker process's log records to the parent's queue.
    """
    route_root_to_queue(queue)

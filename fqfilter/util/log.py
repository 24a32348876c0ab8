import logging
import os
import sys
import json
import datetime

from contextlib import contextmanager

LOG_FORMAT = "%(asctime)s: [%(threadName)12s] %(message)s"


def configure_logger(log_file=None):
    logger = logging.getLogger()
    logger.setLevel(logging.INFO)

    if log_file:
        handler = logging.FileHandler(log_file)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    # Filtered reads go to stdout, so the console log goes to stderr
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)


def write(message, warning=False):
    logger = logging.getLogger()
    if warning:
        logger.warning(message)
    else:
        logger.info(message)


def log_event(event_name, values=None, start_time=None, warning=False):
    '''
    Log "Event '<event_name>' <values as json>", plus the seconds elapsed
    since start_time when one is given. Returns the current time, to be
    passed as start_time to the event that closes this one.
    '''
    message = "Event '%s' %s" % (event_name, json.dumps(values or {}))
    if start_time is not None:
        message += " (%.1f seconds)" % (datetime.datetime.now() - start_time).total_seconds()
    write(message, warning)
    return datetime.datetime.now()


@contextmanager
def log_context(context_name, values=None):
    ''' Bracket a block with ctx_start and ctx_end events, or ctx_error if it raises '''
    caller = sys._getframe(2).f_code
    val = {"n": context_name, "caller": [os.path.basename(caller.co_filename), caller.co_name]}
    if values is not None:
        val["v"] = values
    start = log_event("ctx_start", val)
    try:
        yield
    except Exception as e:
        log_event("ctx_error", {**val, "error": "%s: %s" % (type(e).__name__, e)},
                  start_time=start, warning=True)
        raise
    log_event("ctx_end", val, start_time=start)

import asyncio
import logging
import sys
import threading

logger = logging.getLogger("clinic_router.faults")


def _log_uncaught(exc_type, exc_value, exc_tb):
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_tb)
        return
    logger.error("UNCAUGHT EXCEPTION: %s", exc_value, exc_info=(exc_type, exc_value, exc_tb))


def _log_thread_exception(args):
    logger.error(
        "UNCAUGHT EXCEPTION in thread %s: %s",
        args.thread.name if args.thread else "?",
        args.exc_value,
        exc_info=(args.exc_type, args.exc_value, args.exc_traceback),
    )


def _log_loop_exception(loop, context):
    exc = context.get("exception")
    logger.error("UNHANDLED ASYNC ERROR: %s", context.get("message"), exc_info=exc)


def install_fault_watchers(loop=None):
    """
    Log faults nobody else handled instead of letting them kill the process:
    uncaught exceptions, thread crashes and never-retrieved task errors.
    """
    sys.excepthook = _log_uncaught
    threading.excepthook = _log_thread_exception
    if loop is None:
        loop = asyncio.get_running_loop()
    loop.set_exception_handler(_log_loop_exception)

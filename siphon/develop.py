import os
import sys
import subprocess
import threading
from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer
from .logger import main_logger

IGNORE_FILE = ("develop.py",)
ACTIVE_END = (".py", ".json")
NORMAL_EXIT = 0

logger = main_logger.get_logger()


def slog(*message):
    logger.info(" ".join(("[Monitor]:", *(str(m) for m in message))))


class MainHandler(FileSystemEventHandler):
    def __init__(self, func, ignore=IGNORE_FILE, active_end=ACTIVE_END):
        self.func = func
        self.ignore = ignore
        self.active_end = active_end

    def on_modified(self, event):
        if event.is_directory:
            return
        src_path = os.fsdecode(event.src_path)
        if os.path.basename(src_path) in self.ignore:
            return
        if src_path.endswith(self.active_end):
            slog("source file change >>>", src_path)
            self.func()


class Monitor(object):
    """Runs ``execute`` in a child interpreter and restarts it on source changes.

    The watchdog thread and the polling loop both replace the child, so every
    change to ``_process`` happens under ``_lock``.
    """

    def __init__(self, execute, args=(), path=None):
        self.execute = execute
        self.args = list(args)
        self.path = path or os.getcwd()
        self._process = None
        self._lock = threading.RLock()

    def _run_process(self):
        # stdout/stderr are inherited from the monitor
        with self._lock:
            self._process = subprocess.Popen([sys.executable, self.execute, *self.args], shell=False)

    def _stop_process(self):
        with self._lock:
            if self._process and self._process.poll() is None:
                self._process.kill()
                self._process.wait()

    def _restart_process(self):
        with self._lock:
            self._stop_process()
            self._run_process()
            slog("restart process complete, new pid:", self._process.pid)

    def check(self) -> bool:
        """Restart a failed child; False once it has exited normally."""
        with self._lock:
            code = self._process.poll()
            if code == NORMAL_EXIT:
                return False
            if code is not None:
                slog("process fail, restart process")
                self._restart_process()
            return True

    def run(self):
        observer = Observer()
        observer.schedule(MainHandler(self._restart_process), self.path, recursive=True)
        observer.start()
        self._run_process()
        slog("watchdog running...")
        try:
            while self.check():
                observer.join(1)
        except KeyboardInterrupt:
            pass
        self._stop_process()
        observer.stop()
        observer.join()
        slog("stopped")


if __name__ == '__main__':
    Monitor("main.py", ["--develop", *sys.argv[1:]]).run()

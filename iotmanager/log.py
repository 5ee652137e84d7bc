"""
Logging helpers.

Library modules only call logging.getLogger(__name__); entry points
(the CLI) call configure_logging(). SecretFilter keeps secret keys, tokens
and signatures out of the output.
"""
import logging
import re
import threading
from collections import Counter

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
FLUSH_INTERVAL = 5.0
MIN_SECRET_LENGTH = 8

_SIGNATURE_RE = re.compile(r'Signature=[0-9a-f]+')


class SecretFilter(logging.Filter):
    """
    Replaces registered secrets, and any Signature=<hex>, with [REDACTED].

    Secrets are reference counted: each register_secret() must be paired with
    an unregister_secret(), as IoTDAClient does from __init__() and close().
    Secrets shorter than MIN_SECRET_LENGTH are not registered.
    """

    _secrets = Counter()
    _pattern = None
    _lock = threading.Lock()

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = self._redact(str(record.msg))
        if record.args:
            if isinstance(record.args, dict):
                record.args = {k: self._redact(v) if isinstance(v, str) else v
                               for k, v in record.args.items()}
            else:
                record.args = tuple(self._redact(a) if isinstance(a, str) else a
                                    for a in record.args)
        return True

    def _redact(self, text: str) -> str:
        if self._pattern is not None:
            text = self._pattern.sub('[REDACTED]', text)
        return _SIGNATURE_RE.sub('Signature=[REDACTED]', text)

    @classmethod
    def register_secret(cls, secret: str) -> None:
        if not secret or len(secret) < MIN_SECRET_LENGTH:
            return
        with cls._lock:
            cls._secrets[secret] += 1
            cls._rebuild_pattern()

    @classmethod
    def unregister_secret(cls, secret: str) -> None:
        with cls._lock:
            if secret not in cls._secrets:
                return
            cls._secrets[secret] -= 1
            if cls._secrets[secret] <= 0:
                del cls._secrets[secret]
            cls._rebuild_pattern()

    @classmethod
    def clear_secrets(cls) -> None:
        with cls._lock:
            cls._secrets.clear()
            cls._pattern = None

    @classmethod
    def _rebuild_pattern(cls) -> None:
        # longest first, so a secret containing another is redacted whole
        if cls._secrets:
            cls._pattern = re.compile('|'.join(re.escape(s) for s in sorted(cls._secrets, key=len, reverse=True)))
        else:
            cls._pattern = None


def configure_logging(level: int = logging.INFO, format_string: str = None) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))
    handler.addFilter(SecretFilter())

    root = logging.getLogger()
    root.setLevel(level)
    for existing in root.handlers[:]:
        root.removeHandler(existing)
    root.addHandler(handler)


def flush_handlers() -> None:
    for handler in logging.getLogger().handlers:
        handler.flush()


class LogFlusher:
    """
    Flushes the root logging handlers every `interval` seconds.
    Owned by a client: started with it, stopped by its close().
    """

    def __init__(self, interval: float = FLUSH_INTERVAL):
        self.interval = interval
        self._stop = threading.Event()
        self._thread = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name='LogFlusher', daemon=True)
        self._thread.start()

    def _run(self) -> None:
        while not self._stop.wait(timeout=self.interval):
            flush_handlers()

    def stop(self, timeout: float = None) -> None:
        if self._thread is None:
            return
        self._stop.set()
        self._thread.join(timeout)
        self._thread = None
        flush_handlers()

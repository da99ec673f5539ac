"""
Heartbeat pusher for Uptime Kuma style "push" monitors.

The monitor expects a GET on its push URL at least once a minute:
    https://monitor.example/api/push/<token>?status=up&msg=

Construct one UptimePusher at startup, then either push manually or hand it
to run_in_background(), which pushes "up" every HEARTBEAT_INTERVAL seconds
until the process exits.
"""

import logging
import threading
import time
from urllib.parse import urlsplit

import requests

log = logging.getLogger(__name__)

# The monitor flags us down after 60s without a push; 5s covers ping/jitter.
HEARTBEAT_INTERVAL = 55
PUSH_TIMEOUT = 10

ALLOWED_SCHEMES = ("http", "https")


class InvalidPushURL(ValueError):
    """The push URL is not a usable absolute http(s) URL."""


def validate_url(url):
    """Return url unchanged, or raise InvalidPushURL."""
    if not isinstance(url, str):
        raise InvalidPushURL(f"Invalid push URL {url!r}: expected a string")
    try:
        parts = urlsplit(url)
        parts.port  # raises ValueError on a malformed port
    except ValueError as e:
        raise InvalidPushURL(f"Invalid push URL {url!r}: {e}") from e

    if parts.scheme.lower() not in ALLOWED_SCHEMES:
        raise InvalidPushURL(f"Invalid push URL {url!r}: scheme must be http or https")
    if not parts.hostname:
        raise InvalidPushURL(f"Invalid push URL {url!r}: missing host")

    try:
        requests.Request("GET", url).prepare()
    except requests.RequestException as e:
        raise InvalidPushURL(f"Invalid push URL {url!r}: {e}") from e

    return url


class PushTimeout(requests.Timeout):
    """The monitor didn't finish answering within PUSH_TIMEOUT."""


def get_with_deadline(url):
    """
    GET url, giving up after PUSH_TIMEOUT seconds in total.

    requests' timeout only bounds each connect and each read, so a server
    trickling bytes could hold the call open forever. The request runs on a
    daemon thread that is abandoned once the deadline passes.
    """
    outcome = {}

    def fetch():
        try:
            outcome["response"] = requests.get(url, timeout=PUSH_TIMEOUT)
        except BaseException as e:
            outcome["error"] = e

    worker = threading.Thread(target=fetch, name="uptime-push-request", daemon=True)
    worker.start()
    worker.join(PUSH_TIMEOUT)

    if worker.is_alive():
        raise PushTimeout(f"no complete response within {PUSH_TIMEOUT}s")
    if "error" in outcome:
        raise outcome["error"]
    return outcome["response"]


class UptimePusher:
    def __init__(self, url, silent=False):
        """
        Raises InvalidPushURL if the URL is unusable. Don't catch it: a
        heartbeat pointed at a broken URL is worse than failing at startup.
        """
        self.url = validate_url(url)
        self.interval = HEARTBEAT_INTERVAL
        self.silent = silent

    def status_url(self, status_ok, msg):
        """Base URL with status and msg appended to any existing query."""
        params = {"status": "up" if status_ok else "down", "msg": msg}
        return requests.Request("GET", self.url, params=params).prepare().url

    def push_status_and_msg(self, status_ok, msg):
        """
        Send one push. Returns True if the monitor accepted it.

        Transport errors (timeouts, refused connections, non-2xx) and
        messages that can't be URL-encoded never raise; they're logged
        unless the pusher is silent.
        """
        try:
            response = get_with_deadline(self.status_url(status_ok, msg))
            response.raise_for_status()
        except (requests.RequestException, UnicodeError) as e:
            if not self.silent:
                log.warning(f"Uptime push failed: {e}")
            return False

        log.debug(f"Uptime push sent (status={'up' if status_ok else 'down'}).")
        return True

    def push_ok(self):
        return self.push_status_and_msg(True, "")

    def run_in_background(self):
        """
        Push "up" every interval from a daemon thread.

        There is no way to stop the thread; it runs until the process exits.
        """
        thread = threading.Thread(target=self._heartbeat_loop, name="uptime-pusher", daemon=True)
        thread.start()

    def _heartbeat_loop(self):
        while True:
            try:
                self.push_ok()
            except Exception:
                if not self.silent:
                    log.exception("Uptime push raised unexpectedly")

            # Sleep is measured from after the push, so push latency adds to the period.
            now = time.monotonic()
            remaining = (now + self.interval) - time.monotonic()
            if remaining > 0:
                time.sleep(remaining)

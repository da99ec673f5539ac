"""
Heartbeat entry script: keeps an Uptime Kuma push monitor green.
Run via: cd /path/to/project && /path/to/venv/bin/python main.py

Reads UPTIME_PUSH_URL (and optionally UPTIME_PUSH_SILENT) from the
environment or a .env file next to this script.
"""

import logging
import os
import time

from dotenv import load_dotenv

from uptime_pusher import UptimePusher

env_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), '.env')
load_dotenv(env_path)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
)
log = logging.getLogger(__name__)

TRUTHY = {"1", "true", "yes", "on"}


# --- Config ---
def load_config():
    url = os.getenv("UPTIME_PUSH_URL")
    silent = os.getenv("UPTIME_PUSH_SILENT", "").strip().lower() in TRUTHY
    return url, silent


# --- Main ---

def main():
    url, silent = load_config()
    if not url:
        log.warning("UPTIME_PUSH_URL not set — skipping heartbeat")
        return

    # An invalid URL raises here and should take the process down with it.
    pusher = UptimePusher(url, silent=silent)

    log.info("--- Starting heartbeat ---")
    pusher.push_status_and_msg(True, "started")
    pusher.run_in_background()
    log.info(f"Pushing every {pusher.interval}s (silent={silent})")

    try:
        while True:
            time.sleep(3600)
    except KeyboardInterrupt:
        log.info("Interrupted, reporting down")
        pusher.push_status_and_msg(False, "stopped")

    log.info("--- Done ---")


if __name__ == "__main__":
    main()

"""Publishing the summary post, with a local log file fallback.

Posting goes through an external CLI (``bird tweet <text>`` by default) that
shares our terminal, so its own login prompts reach the operator. When it is
missing or fails, the post is appended to ``logs/tweet-<date>.log`` for
manual posting.
"""

import os
import subprocess
import sys
from datetime import datetime
from enum import Enum
from typing import Optional

import config


class PublishOutcome(Enum):
    PUBLISHED = "published"
    FAILED_AND_LOGGED = "failed_and_logged"

    @property
    def exit_code(self) -> int:
        return 0 if self is PublishOutcome.PUBLISHED else 2


class CommandPublisher:
    """Publish by running ``<command> <subcommand> <text>``.

    Any object with a ``publish(text) -> bool`` method can be used in its place.
    """

    def __init__(self, command: Optional[str] = None, subcommand: Optional[str] = None):
        self.command = command or config.POST_COMMAND
        self.subcommand = subcommand or config.POST_SUBCOMMAND

    def publish(self, text: str) -> bool:
        try:
            # stdio is inherited on purpose: the tool may prompt for auth
            subprocess.run([self.command, self.subcommand, text], check=True)
        except FileNotFoundError:
            print(f"⚠️ {self.command} not found on PATH", file=sys.stderr)
            return False
        except subprocess.CalledProcessError as e:
            print(f"⚠️ {self.command} {self.subcommand} exited with status {e.returncode}", file=sys.stderr)
            return False
        except OSError as e:
            print(f"⚠️ {self.command} could not be started: {e}", file=sys.stderr)
            return False
        return True

    def __str__(self) -> str:
        return f"{self.command} {self.subcommand}"


def append_local_log(text: str, now: datetime, log_dir: Optional[str] = None) -> str:
    """Append ``text`` to the day's fallback log and return the file path.

    No locking: concurrent runs rely on small appends being atomic.
    """
    directory = os.path.abspath(log_dir or config.LOG_DIR)
    os.makedirs(directory, exist_ok=True)
    path = os.path.join(directory, f"tweet-{now.date().isoformat()}.log")
    with open(path, "a", encoding="utf-8") as f:
        f.write(f"\n---\n{text}\n")
    return path


def publish_with_fallback(text: str, publisher, now: datetime, log_dir: Optional[str] = None) -> PublishOutcome:
    if publisher.publish(text):
        return PublishOutcome.PUBLISHED
    path = append_local_log(text, now, log_dir)
    print(f"\n[ashare-snowball] {publisher} failed; saved tweet to: {path}", file=sys.stderr)
    return PublishOutcome.FAILED_AND_LOGGED

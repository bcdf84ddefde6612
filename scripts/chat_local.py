#!/usr/bin/env python3
"""
Interactive local chat harness (no HTTP, no Twilio).

Usage:
  python3 scripts/chat_local.py

Messages typed here go through the same HandleIncomingMessageUseCase as the
webhook, using the seeded demo salon. Replies are printed instead of sent.
"""

from __future__ import annotations

import os
import sys
import time
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from salonbot.core.config import settings  # noqa: E402
from salonbot.wiring.dependencies import get_container  # noqa: E402


def _print_header(phone: str) -> None:
    print("\nLocal Chat Harness")
    print("-" * 60)
    print(f"phone: {phone}")
    print("Type your message and press Enter.")
    print("Commands: /new (new phone), /state, /appointments, /quit, /help")
    print("-" * 60)


def main() -> None:
    phone = os.getenv("CHAT_PHONE", "+910000000001")
    container = get_container()
    use_case = container["use_case"]
    store = container["store"]
    appointments = container["appointments"]
    _print_header(phone)

    while True:
        try:
            user_text = input("\n> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            return

        if not user_text:
            continue

        cmd = user_text.lower()
        if cmd in ("/quit", "/exit"):
            print("Bye!")
            return
        if cmd == "/help":
            print("Commands:")
            print("  /new  -> start over with a fresh phone number")
            print("  /state -> show the stored booking step")
            print("  /appointments -> list booked appointments")
            print("  /quit -> exit")
            continue
        if cmd == "/new":
            phone = f"+91{int(time.time())}"
            print(f"New phone: {phone}")
            continue
        if cmd == "/state":
            state = store.get(phone)
            print(state.step.value if state else "(no active conversation)")
            continue
        if cmd == "/appointments":
            for appointment in appointments.all():
                print(f"{appointment.scheduled_at:%Y-%m-%d %H:%M} staff={appointment.staff_id} status={appointment.status}")
            continue

        reply = use_case.build_reply(phone, user_text, settings.DEFAULT_TENANT_ID)
        print("\n--- Reply ---")
        print(reply.strip() if reply else "(no reply)")
        print("-" * 60)


if __name__ == "__main__":
    main()

"""Terminal pomodoro timer backed by the Planora database.

    python tools/pomodoro_cli.py you@example.com [minutes]

Enter (or space + Enter) starts/pauses, r + Enter resets, q + Enter quits.
"""
import asyncio
import sys
from pathlib import Path

# ensure project root is on sys.path
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from planora.main import app  # noqa: E402,F401 (creates tables)
from planora.database import SessionLocal  # noqa: E402
from planora.models.user import Profile  # noqa: E402
from planora.services.pomodoro import PomodoroController, SqlSessionStore  # noqa: E402


def lookup_user(email: str) -> str:
    db = SessionLocal()
    try:
        profile = db.query(Profile).filter(Profile.email == email).first()
        if not profile:
            sys.exit(f"no such user: {email}")
        return profile.id
    finally:
        db.close()


async def show(timer: PomodoroController):
    while True:
        print(f"\r{timer.display} [{timer.state}]   ", end="", flush=True)
        await asyncio.sleep(0.5)


async def main(email: str, minutes: int):
    timer = PomodoroController(SqlSessionStore(lookup_user(email)), duration_minutes=minutes)
    painter = asyncio.create_task(show(timer))
    loop = asyncio.get_running_loop()
    try:
        while True:
            line = (await loop.run_in_executor(None, sys.stdin.readline)).strip().lower()
            if line == "q":
                break
            await timer.handle_key(line or " ")
            if timer.last_error:
                print(f"\nerror: {timer.last_error}")
    finally:
        painter.cancel()
        await timer.close()
        print()


if __name__ == "__main__":
    if len(sys.argv) < 2:
        sys.exit(__doc__)
    asyncio.run(main(sys.argv[1], int(sys.argv[2]) if len(sys.argv) > 2 else 25))

"""
main.py — Unified launcher for WeatherBot.

Usage:
    python main.py

Starts the bot backend and the Streamlit frontend as subprocesses, in order,
waiting for each health endpoint before moving on. Press Ctrl-C to exit; both
servers are terminated cleanly on exit, and the launcher also exits if either
server dies on its own.
"""

import os
import sys
import subprocess
import time
from pathlib import Path
from typing import IO, NamedTuple

import httpx
from dotenv import load_dotenv

ROOT = Path(__file__).parent
load_dotenv(dotenv_path=ROOT / ".env")

BOT_PORT = int(os.getenv("BOT_PORT", "8001"))
FRONTEND_PORT = int(os.getenv("FRONTEND_PORT", "8501"))


class Service(NamedTuple):
    label: str
    command: list[str]
    cwd: Path
    base_url: str
    health_path: str
    startup_timeout: int
    log_name: str

    @property
    def health_url(self) -> str:
        return self.base_url + self.health_path


SERVICES = [
    Service(
        label="Bot server",
        command=[sys.executable, "bot_server.py"],
        cwd=ROOT / "bot-backend",
        base_url=f"http://localhost:{BOT_PORT}",
        health_path="/health",
        startup_timeout=15,
        log_name="bot_server.log",
    ),
    Service(
        label="Streamlit frontend",
        command=[
            sys.executable, "-m", "streamlit", "run", "frontend/app.py",
            "--server.port", str(FRONTEND_PORT),
            "--server.headless", "true",
        ],
        cwd=ROOT,
        base_url=f"http://localhost:{FRONTEND_PORT}",
        health_path="/_stcore/health",
        startup_timeout=30,
        log_name="frontend.log",
    ),
]


def _wait_for_health(url: str, timeout: float, poll_interval: float = 0.5) -> bool:
    """Poll GET url until status 200 or timeout (seconds). Returns True on success."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        try:
            if httpx.get(url, timeout=1.0).status_code == 200:
                return True
        except httpx.HTTPError:
            pass
        time.sleep(poll_interval)
    return False


def _banner(services: list[Service]) -> str:
    rows = ["WeatherBot"]
    rows += [f"{s.label:<20} → {s.base_url}" for s in services]
    rows += [f"Log: {s.log_name}" for s in services]
    width = max(len(row) for row in rows) + 2
    lines = ["╔" + "═" * (width + 2) + "╗"]
    lines += [f"║ {row:<{width}} ║" for row in rows]
    lines.append("╚" + "═" * (width + 2) + "╝")
    return "\n".join(lines)


def _status_prefix(label: str, services: list[Service]) -> str:
    width = max(len(s.label) for s in services)
    return f"Starting {label}...".ljust(width + len("Starting ... "))


def _first_exited(procs: list[subprocess.Popen]) -> subprocess.Popen | None:
    for proc in procs:
        if proc.poll() is not None:
            return proc
    return None


def _shutdown(procs: list[subprocess.Popen], log_files: list[IO]) -> None:
    """SIGTERM all processes, wait up to 5 s each, then SIGKILL stragglers."""
    for p in procs:
        if p.poll() is None:
            p.terminate()
    for p in procs:
        try:
            p.wait(timeout=5)
        except subprocess.TimeoutExpired:
            p.kill()
    for f in log_files:
        f.close()


def _start(service: Service, procs: list[subprocess.Popen], log_files: list[IO]) -> bool:
    print(_status_prefix(service.label, SERVICES), end="", flush=True)
    log = open(ROOT / service.log_name, "w")
    log_files.append(log)
    procs.append(
        subprocess.Popen(service.command, cwd=service.cwd, stdout=log, stderr=subprocess.STDOUT)
    )
    if _wait_for_health(service.health_url, timeout=service.startup_timeout):
        print("OK")
        return True
    print("FAILED")
    print(
        f"Error: {service.label} did not become healthy within {service.startup_timeout} s.\n"
        f"Check {service.log_name} for details.",
        file=sys.stderr,
    )
    return False


def main() -> None:
    log_files: list[IO] = []
    procs: list[subprocess.Popen] = []
    exit_code = 0

    print(_banner(SERVICES))
    try:
        for service in SERVICES:
            if not _start(service, procs, log_files):
                exit_code = 1
                return

        print(f"\nOpen your browser at: {SERVICES[-1].base_url}")
        print("Press Ctrl-C to stop all services.\n")

        try:
            while (dead := _first_exited(procs)) is None:
                time.sleep(1)
        except KeyboardInterrupt:
            print()
        else:
            label = SERVICES[procs.index(dead)].label
            print(f"{label} exited with code {dead.returncode}.", file=sys.stderr)
            exit_code = 1

    finally:
        print("Shutting down...")
        _shutdown(procs, log_files)
        if exit_code:
            sys.exit(exit_code)


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
Stock Ledger management CLI.

Usage:
    python manage.py start       Start the API server in the background
    python manage.py stop        Graceful shutdown
    python manage.py restart     Stop + start
    python manage.py dev         Run the server in the foreground with reload
    python manage.py status      Check if the server is running
    python manage.py migrate     Apply pending database migrations
"""

import argparse
import asyncio
import os
import re
import signal
import socket
import subprocess
import sys
import time
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent
PID_FILE = ROOT_DIR / ".stockledger.pid"
APP_PATH = "stockledger.api.main:app"


def _is_pid_alive(pid: int) -> bool:
    try:
        os.kill(pid, 0)
        return True
    except OSError:
        return False


def _read_pid() -> int | None:
    """PID from the pid file, or None if missing or stale."""
    if not PID_FILE.exists():
        return None
    try:
        pid = int(PID_FILE.read_text().strip())
    except (ValueError, OSError):
        return None
    if _is_pid_alive(pid):
        return pid
    PID_FILE.unlink(missing_ok=True)
    return None


def _find_pid_on_port(port: int) -> int | None:
    """PID of the process listening on `port` (lsof, then ss)."""
    try:
        result = subprocess.run(
            ["lsof", "-ti", f"TCP:{port}", "-sTCP:LISTEN"],
            capture_output=True,
            text=True,
        )
        if result.returncode == 0 and result.stdout.strip():
            return int(result.stdout.strip().splitlines()[0])
    except (OSError, ValueError):
        pass
    try:
        result = subprocess.run(
            ["ss", "-tlnp", f"sport = :{port}"],
            capture_output=True,
            text=True,
        )
        match = re.search(r"pid=(\d+)", result.stdout)
        if match:
            return int(match.group(1))
    except (OSError, ValueError):
        pass
    return None


def _is_port_free(port: int) -> bool:
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.bind(("127.0.0.1", port))
        return True
    except OSError:
        return False


def _stop_pid(pid: int, timeout: float = 3.0) -> bool:
    """SIGTERM, then SIGKILL if the process outlives `timeout`."""
    try:
        os.kill(pid, signal.SIGTERM)
    except OSError:
        return not _is_pid_alive(pid)

    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if not _is_pid_alive(pid):
            return True
        time.sleep(0.1)

    try:
        os.kill(pid, signal.SIGKILL)
    except OSError:
        pass
    time.sleep(0.2)
    return not _is_pid_alive(pid)


def _uvicorn_cmd(host: str, port: int, workers: int = 1, reload: bool = False) -> list[str]:
    cmd = [sys.executable, "-m", "uvicorn", APP_PATH, "--host", host, "--port", str(port)]
    if reload:
        cmd.append("--reload")
    elif workers > 1:
        cmd += ["--workers", str(workers)]
    return cmd


def cmd_start(args: argparse.Namespace) -> None:
    """Start the server in the background and record its PID."""
    existing_pid = _read_pid()
    if existing_pid is not None:
        print(f"Server already running (PID {existing_pid}). Use 'restart' or 'stop' first.")
        sys.exit(1)

    if not _is_port_free(args.port):
        holder = _find_pid_on_port(args.port)
        print(f"Error: Port {args.port} is in use" + (f" by PID {holder}." if holder else "."))
        sys.exit(1)

    print(f"Starting server on {args.host}:{args.port}...")
    proc = subprocess.Popen(
        _uvicorn_cmd(args.host, args.port, workers=args.workers),
        cwd=str(ROOT_DIR),
    )
    PID_FILE.write_text(str(proc.pid))
    print(f"Server started (PID {proc.pid}).")
    print(f"  API:      http://{args.host}:{args.port}/api/health")
    print(f"  PID file: {PID_FILE}")


def cmd_stop(args: argparse.Namespace) -> None:
    """Stop the running server."""
    pid = _read_pid()
    if pid is None:
        pid = _find_pid_on_port(args.port)
        if pid is None:
            print("Server is not running.")
            return
        print(f"No PID file found. Detected server on port {args.port} (PID {pid}).")

    print(f"Stopping server (PID {pid})...")
    stopped = _stop_pid(pid)
    PID_FILE.unlink(missing_ok=True)
    print("Server stopped." if stopped else "Warning: Server may still be running.")


def cmd_restart(args: argparse.Namespace) -> None:
    cmd_stop(args)
    cmd_start(args)


def cmd_dev(args: argparse.Namespace) -> None:
    """Run uvicorn in the foreground with --reload."""
    print(f"Starting server on {args.host}:{args.port} (reload mode)...")
    try:
        subprocess.run(_uvicorn_cmd(args.host, args.port, reload=True), cwd=str(ROOT_DIR))
    except KeyboardInterrupt:
        print("\nServer stopped.")


def cmd_status(args: argparse.Namespace) -> None:
    """Check if the server is running."""
    pid = _read_pid()
    if pid is not None:
        print(f"Server is running (PID {pid}).")
        return

    port_pid = _find_pid_on_port(args.port)
    if port_pid is not None:
        print(f"No PID file, but port {args.port} is held by PID {port_pid}.")
        print("  This may be a stale server. Use 'stop' to clean up.")
    elif not _is_port_free(args.port):
        print(f"No PID file. Port {args.port} is in use (process could not be identified).")
    else:
        print(f"Server is not running (port {args.port} is free).")


def cmd_migrate(args: argparse.Namespace) -> None:
    """Apply pending migrations, or report status with --status."""
    from stockledger.config import configure_logging
    from stockledger.infrastructure.storage.sqlite.migrations import (
        get_migration_status,
        run_migrations,
        verify_schema_integrity,
    )

    configure_logging()

    if args.status:
        status = asyncio.run(get_migration_status())
        print(f"Current version: {status['current_version'] or 'none'}")
        for version in status["pending_migrations"]:
            print(f"  pending: {version}")
        return

    results = asyncio.run(run_migrations(create_backup_before=not args.no_backup))
    for result in results:
        state = "ok" if result.success else f"FAILED ({result.error})"
        print(f"  {result.version}: {state}")
    if not results:
        print("Database is up to date.")

    failed = [c for c in asyncio.run(verify_schema_integrity()) if c["status"] != "PASS"]
    for check in failed:
        print(f"  integrity check failed: {check}")
    if failed:
        sys.exit(1)
    if any(not r.success for r in results):
        sys.exit(1)


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Stock Ledger management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    for name, func, help_text in (
        ("start", cmd_start, "Start the server"),
        ("restart", cmd_restart, "Restart the server"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("--host", default="0.0.0.0", help="Bind host (default: 0.0.0.0)")
        p.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000)")
        p.add_argument("--workers", type=int, default=1, help="Number of uvicorn workers")
        p.set_defaults(func=func)

    p_dev = sub.add_parser("dev", help="Run the server with reload")
    p_dev.add_argument("--host", default="127.0.0.1", help="Bind host (default: 127.0.0.1)")
    p_dev.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000)")
    p_dev.set_defaults(func=cmd_dev)

    for name, func, help_text in (
        ("stop", cmd_stop, "Stop the server"),
        ("status", cmd_status, "Check if server is running"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("--port", type=int, default=8000, help="Port to check (default: 8000)")
        p.set_defaults(func=func)

    p_migrate = sub.add_parser("migrate", help="Apply database migrations")
    p_migrate.add_argument("--status", action="store_true", help="Show migration status only")
    p_migrate.add_argument("--no-backup", action="store_true", help="Skip the pre-migration backup")
    p_migrate.set_defaults(func=cmd_migrate)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()

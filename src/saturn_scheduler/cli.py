"""Terminal interface for Saturn Scheduler."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table
from rich.theme import Theme

from saturn_scheduler import directory
from saturn_scheduler.database import init_db
from saturn_scheduler.errors import SchedulerError
from saturn_scheduler.models import (
    GenerateScheduleRequest,
    InterviewerCreate,
    SchedulePreferences,
    ScheduleResult,
    Specialization,
)

custom_theme = Theme({
    "info": "cyan",
    "warning": "yellow",
    "error": "bold red",
    "success": "bold green",
})

console = Console(theme=custom_theme)


def _read_job(value: str) -> str:
    """``--job`` accepts literal text or ``@path`` to read it from a file."""
    if value.startswith("@"):
        return Path(value[1:]).read_text(encoding="utf-8")
    return value


# ── Commands ──────────────────────────────────────────────────────────────

def cmd_serve(args: argparse.Namespace) -> None:
    import uvicorn

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )
    uvicorn.run("saturn_scheduler.main:app", host=args.host, port=args.port, reload=args.reload)


def cmd_interviewers_list(args: argparse.Namespace) -> None:
    rows = directory.list_interviewers(order=args.order)
    if not rows:
        console.print("[warning]No interviewers yet. Add one with `saturn-scheduler interviewers add`.[/warning]")
        return
    table = Table(title="Interviewers")
    table.add_column("ID", style="bold")
    table.add_column("Name")
    table.add_column("Email")
    table.add_column("Specialization")
    for i in rows:
        table.add_row(i.id, i.name, i.email, i.specialization_label)
    console.print(table)


def cmd_interviewers_add(args: argparse.Namespace) -> None:
    interviewer = directory.add_interviewer(InterviewerCreate(
        name=args.name,
        email=args.email,
        specialization=Specialization(args.specialization) if args.specialization else None,
    ))
    console.print(f"[success]Added {interviewer.name} ({interviewer.id})[/success]")


def cmd_interviewers_remove(args: argparse.Namespace) -> None:
    if directory.remove_interviewer(args.id):
        console.print(f"[success]Removed {args.id}[/success]")
    else:
        console.print(f"[error]Interviewer {args.id} not found[/error]")
        sys.exit(1)


def cmd_schedule(args: argparse.Namespace) -> None:
    from saturn_scheduler.routes.settings import get_config
    from saturn_scheduler.scheduling.service import generate_schedule

    cfg = get_config()
    if args.backend:
        cfg.matching_backend = args.backend
    cfg.require_valid()
    payload = GenerateScheduleRequest(
        csv_data=Path(args.roster).read_text(encoding="utf-8"),
        interviewer_ids=args.interviewer,
        job_description=_read_job(args.job),
        preferences=SchedulePreferences(
            duration=args.duration or cfg.default_duration,
            timezone=args.timezone or cfg.default_timezone,
            start_date=args.start_date,
        ),
    )
    console.print("[info]Generating schedule...[/info]")
    _print_result(generate_schedule(cfg, payload))


def _print_result(result: ScheduleResult) -> None:
    meta = result.metadata
    table = Table(title=f"Interview Schedule ({meta.scheduling_algorithm})")
    table.add_column("Date", style="bold")
    table.add_column("Time")
    table.add_column("Candidate")
    table.add_column("Interviewer")
    table.add_column("Score", justify="right")
    table.add_column("Skill gaps")
    for e in result.schedule:
        table.add_row(
            e.date,
            f"{e.start_time}-{e.end_time}",
            e.candidate.name,
            e.interviewer.name,
            f"{e.matching_score:.2f}",
            ", ".join(e.skill_gaps) or "-",
        )
    console.print(table)

    a = result.analytics
    console.print(
        f"[info]{meta.total_candidates} candidates, {meta.total_interviewers} interviewers, "
        f"{meta.duration} min ({meta.timezone}). Optimization {a.optimization_score:.1f}, "
        f"efficiency {a.schedule_efficiency:.0%}, conflicts {a.conflict_count}.[/info]"
    )
    for rec in result.recommendations:
        console.print(f"  • {rec}")


# ── Parser ────────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="saturn-scheduler", description="Batch interview scheduling.")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("serve", help="Run the HTTP API")
    p.add_argument("--host", default="127.0.0.1")
    p.add_argument("--port", type=int, default=8000)
    p.add_argument("--reload", action="store_true")
    p.add_argument("-v", "--verbose", action="store_true")
    p.set_defaults(func=cmd_serve)

    p = sub.add_parser("interviewers", help="Manage the interviewer directory")
    isub = p.add_subparsers(dest="action", required=True)
    q = isub.add_parser("list")
    q.add_argument("--order", choices=("created", "name"), default="created")
    q.set_defaults(func=cmd_interviewers_list)
    q = isub.add_parser("add")
    q.add_argument("name")
    q.add_argument("email")
    q.add_argument("--specialization", choices=[s.value for s in Specialization])
    q.set_defaults(func=cmd_interviewers_add)
    q = isub.add_parser("remove")
    q.add_argument("id")
    q.set_defaults(func=cmd_interviewers_remove)

    p = sub.add_parser("schedule", help="Generate a schedule from a candidate roster CSV")
    p.add_argument("roster", help="Path to the candidate CSV")
    p.add_argument("--job", required=True, help="Job description text, or @FILE")
    p.add_argument("--interviewer", action="append", default=[], metavar="ID", required=True)
    p.add_argument("--duration", type=int)
    p.add_argument("--timezone")
    p.add_argument("--start-date", dest="start_date", help="First day of the horizon (YYYY-MM-DD)")
    p.add_argument("--backend", choices=("constraint", "llm"))
    p.set_defaults(func=cmd_schedule)
    return parser


def main(argv: list[str] | None = None) -> None:
    """Entry point for the saturn-scheduler CLI."""
    args = build_parser().parse_args(argv)
    init_db()
    try:
        args.func(args)
    except SchedulerError as e:
        console.print(f"[error]{e.category}: {e.details}[/error]")
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("\n[info]Goodbye![/info]")


if __name__ == "__main__":
    main()

from __future__ import annotations

import argparse
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from acr.core.config import configure_logging, load_settings
from acr.core.errors import ConfigurationError
from acr.core.provider import GeminiClient
from acr.core.report import REPORT_FILENAME
from acr.core.session import ReviewSession, ReviewStatus
from acr.core.view import group_by_severity
from acr.utils.fs import SUPPORTED_LANGUAGES, detect_language, is_probably_text, read_text_file

console = Console()

SEVERITY_STYLE = {
    "Critical": "bold red",
    "Major": "dark_orange",
    "Minor": "yellow",
    "Info": "blue",
}


def render_findings_console(session: ReviewSession, path: Path) -> None:
    console.print(f"\n[bold]File:[/bold] {path}")
    console.print(f"[bold]Language:[/bold] {session.language}   [bold]Findings:[/bold] {len(session.findings or [])}\n")

    groups = group_by_severity(session.visible_findings())
    if not groups:
        console.print("[green]No issues found. Great job![/green]")
        return

    t = Table(title="Findings", show_lines=True)
    t.add_column("Severity")
    t.add_column("Lines")
    t.add_column("Description")
    t.add_column("Suggestion")

    for severity, findings in groups.items():
        style = SEVERITY_STYLE[severity]
        for f in findings:
            t.add_row(f"[{style}]{severity}[/{style}]", escape(f.location), escape(f.description), escape(f.suggestion))

    console.print(t)


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(prog="acr", description="AI code reviewer (Gemini)")
    ap.add_argument("target", help="Source file to review")
    ap.add_argument("--language", default=None, help=f"Language tag (default: from the file extension, else {SUPPORTED_LANGUAGES[0]})")
    ap.add_argument("--structured", action="store_true", help="Bias the review toward data layout and data flow")
    ap.add_argument("--model", default=None, help="Gemini model name (default: ACR_MODEL or gemini-2.5-flash)")
    ap.add_argument("--temperature", type=float, default=None, help="Sampling temperature")
    ap.add_argument("--severity", default="All", choices=["All", *SEVERITY_STYLE], help="Only show findings of this severity")
    ap.add_argument("--out", default="reports", help="Output directory for the Markdown report")
    args = ap.parse_args(argv)

    load_dotenv()
    try:
        settings = load_settings()
    except ConfigurationError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        return 2
    configure_logging(settings.log_level)

    overrides = {k: v for k, v in {"model": args.model, "temperature": args.temperature}.items() if v is not None}
    if overrides:
        settings = settings.model_copy(update=overrides)

    fp = Path(args.target)
    if not fp.is_file() or not is_probably_text(fp.name):
        console.print(f"[red]Not a reviewable file: {fp}[/red]")
        return 2

    session = ReviewSession(settings)
    session.code = read_text_file(fp)
    session.language = args.language or detect_language(fp.name) or SUPPORTED_LANGUAGES[0]
    session.structured = args.structured
    if not session.can_submit:
        console.print(f"[red]{fp} is empty.[/red]")
        return 2

    with GeminiClient(settings) as client:
        with console.status(f"Reviewing {fp.name}..."):
            session.submit(client)

    if session.status is ReviewStatus.FAILED:
        console.print(f"[red]{escape(session.error_message)}[/red]")
        return 1

    session.set_filter(args.severity)
    render_findings_console(session, fp)

    out_dir = Path(args.out)
    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = out_dir / REPORT_FILENAME
    out_path.write_text(session.report(), encoding="utf-8")
    console.print(f"[dim]Saved:[/dim] {out_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

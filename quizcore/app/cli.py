from __future__ import annotations

"""CLI for quizcore using SessionService."""

import argparse
import sys
from typing import Callable, Optional

import yaml

from ..catalog.questions import Question
from ..config.config import load_config, validate_config
from ..errors import QuizError
from ..results.export import write_report
from ..stats.stats import format_summary
from ..util.ids import generate_session_id, seed_if_needed
from .log import clear_session_id, set_session_id, setup_logging
from .session_service import SessionService


def _resolve_choice(question: Question, raw: str) -> Optional[str]:
    """Map user input to an answer token: '1'/'2', a token, or its first letter."""
    val = raw.strip().lower()
    if not val:
        return None
    if val in ("1", "2"):
        return question.options[int(val) - 1]
    for opt in question.options:
        if val == opt or val == opt[0]:
            return opt
    return val


def _prompt_for(question: Question, index: int, total: int) -> str:
    pos, neg = question.labels
    return f"[{index}/{total}] {question.category_display}: {question.text} (1={pos}, 2={neg}, Enter=skip) "


def run_quiz(
    service: SessionService,
    session_id: str,
    ask: Optional[Callable[[str], str]] = None,
    inform: Optional[Callable[[str], None]] = None,
):
    """Ask every catalog question once, record answers, then complete the session."""
    ask = ask or input
    inform = inform or print
    questions = service.list_questions()
    service.start_session(session_id, len(questions))
    for i, q in enumerate(questions, start=1):
        while True:
            try:
                raw = ask(_prompt_for(q, i, len(questions)))
            except EOFError:
                raw = ""
            token = _resolve_choice(q, raw)
            if token is None:
                break
            try:
                service.submit_answer(session_id, q.id, token)
                break
            except QuizError as e:
                inform(f"  {e}")
        p = service.progress(session_id)
        inform(f"  {p.percent}% complete ({p.answered}/{p.total})")
    return service.complete_session(session_id)


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(prog="quizcore")
    sub = p.add_subparsers(dest="cmd", required=True)

    lp = sub.add_parser("list-questions")
    lp.add_argument("--config", default=None)

    cp = sub.add_parser("show-config")
    cp.add_argument("--config", default=None)

    tp = sub.add_parser("take")
    tp.add_argument("--config", default=None)
    tp.add_argument("--session-id", default=None)
    tp.add_argument("--explain", action="store_true")
    tp.add_argument("--out", default=None, help="Write the JSON results record to this file or directory")

    args = p.parse_args(argv)

    try:
        cfg = validate_config(load_config(args.config))
        log_cfg = cfg["logging"]
        setup_logging(log_cfg["level"], json_logs=log_cfg["json"])

        if args.cmd == "show-config":
            print(yaml.safe_dump(cfg, sort_keys=False).rstrip())
            return 0

        service = SessionService.from_config(cfg)

        if args.cmd == "list-questions":
            for q in service.list_questions():
                print(f"{q.order:>3}. [{q.id}] {q.text} ({'/'.join(q.options)})")
            return 0

        if args.cmd == "take":
            seed_if_needed()
            if args.explain:
                from .explain import enable as explain_enable
                explain_enable(True)
            session_id = args.session_id or generate_session_id()
            set_session_id(session_id)
            try:
                report = run_quiz(service, session_id)
            finally:
                clear_session_id()
            print(format_summary(report.summary))
            if args.out:
                path = write_report(report, args.out)
                print(f"Results written to {path}")
            return 0
    except QuizError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    return 2


if __name__ == "__main__":
    raise SystemExit(main())

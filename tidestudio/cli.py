"""cli.py — Terminal front-end for tide-studio.

Drives the same controller a graphical front-end would: inputs are filled
from arguments, a control is activated, and regions and toasts are printed.
Destructive actions ask for confirmation unless --yes is given.
"""

import argparse
import asyncio
import logging
import os
import sys

from . import __version__, viewport
from .actions import QUICK_ACTIONS
from .client import Transport
from .config import get, get_int, load_config, validate
from .controller import StudioController

logger = logging.getLogger(__name__)

STUDIO_ROOT = os.environ.get("STUDIO_ROOT", os.getcwd())

RESULT_REGIONS = (
    viewport.GENERATOR_OUTPUT,
    viewport.MIGRATION_OUTPUT,
    viewport.SEEDER_OUTPUT,
    viewport.DATABASE_OUTPUT,
    viewport.QUERY_RESULTS,
    viewport.QUERY_TIME,
)


def configure_logging(level):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


class TerminalViewPort(viewport.ViewPort):
    """Prints result regions; everything else is kept for inspection."""

    def __init__(self, stream=None):
        self.stream = stream or sys.stdout
        self.statuses = {}

    def set_output(self, region_id, text):
        if region_id in RESULT_REGIONS and text:
            print(f"[{region_id}]\n{text}\n", file=self.stream)

    def set_status(self, region_id, state):
        self.statuses[region_id] = state


def _print_toast(event, entry):
    if event == "shown":
        print(f"{entry.icon} {entry.title}: {entry.body}")


async def _confirm_prompt(pending):
    print(f"⚠ {pending.title}")
    print(f"  {pending.message}")
    answer = await asyncio.to_thread(input, "Proceed? [y/N] ")
    return answer.strip().lower() in ("y", "yes")


async def _run(cfg, control_id, inputs, assume_yes=False):
    view = TerminalViewPort()
    controller = StudioController(
        Transport(get(cfg, "backend_url", "http://127.0.0.1:8080")),
        view,
        ttl_ms=get_int(cfg, "toast_ttl_ms", 5000),
        listener=_print_toast,
    )
    await controller.start()
    for input_id, value in inputs.items():
        controller.set_input(input_id, value)

    if control_id is None:
        return controller.gate.is_available()

    result = await controller.activate(control_id)

    if controller.workflow.modal_visible:
        if assume_yes or await _confirm_prompt(controller.workflow.pending):
            result = await controller.activate("modal-confirm")
        else:
            await controller.activate("modal-cancel")
            print("Cancelled.")
            return False

    if isinstance(result, asyncio.Future):
        result = await result
    if isinstance(result, str):
        return True
    return bool(result is not None and result.success)


# ── Argument parsing ────────────────────────────────────────────


def _add_model_args(p):
    p.add_argument("name", help="Model name (e.g. User, BlogPost)")
    p.add_argument("--table", default="", help="Table name")
    p.add_argument("--fields", default="", help='e.g. "name:string,email:string:unique"')
    p.add_argument("--relations", default="", help='e.g. "posts:has_many:Post"')
    p.add_argument("--indexed", default="", help='e.g. "email,username"')
    p.add_argument("--no-timestamps", action="store_true")
    p.add_argument("--soft-deletes", action="store_true")
    p.add_argument("--migration", action="store_true")
    p.add_argument("--factory", action="store_true")
    p.add_argument("--seeder", action="store_true")


def _model_inputs(args):
    return {
        "model-name": args.name,
        "table-name": args.table,
        "fields": args.fields,
        "relations": args.relations,
        "indexes": args.indexed,
        "opt-timestamps": not args.no_timestamps,
        "opt-soft-delete": args.soft_deletes,
        "opt-migration": args.migration,
        "opt-factory": args.factory,
        "opt-seeder": args.seeder,
    }


def build_parser():
    parser = argparse.ArgumentParser(
        prog="tide-studio", description="Operator console for the TideORM CLI"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--backend", help="Backend URL (overrides backend_url)")
    parser.add_argument("--log-level", help="Logging level (overrides log_level)")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("serve", help="Run the studio backend")
    p.add_argument("-H", "--host")
    p.add_argument("-p", "--port", type=int)
    p.add_argument("-v", "--verbose", action="store_true", help="Log every request")

    sub.add_parser("check", help="Check whether the project is configured")

    p = sub.add_parser("model", help="Generate a model")
    _add_model_args(p)
    p.add_argument("--preview", action="store_true", help="Only print the command")

    p = sub.add_parser("preview", help="Print the model command without running it")
    _add_model_args(p)

    for kind in ("migration", "seeder", "factory"):
        p = sub.add_parser(kind, help=f"Generate a {kind}")
        p.add_argument("name")

    p = sub.add_parser("seed", help="Run a specific seeder class")
    p.add_argument("name")

    p = sub.add_parser("action", help="Run a migration or database action")
    p.add_argument("action", choices=sorted(QUICK_ACTIONS))
    p.add_argument("-y", "--yes", action="store_true", help="Skip confirmation")

    p = sub.add_parser("query", help="Send SQL to the query playground")
    p.add_argument("sql")
    p.add_argument("-y", "--yes", action="store_true", help="Skip confirmation")

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    cfg = load_config(STUDIO_ROOT)
    if args.backend:
        cfg["backend_url"] = args.backend
    if args.log_level:
        cfg["log_level"] = args.log_level
    if getattr(args, "verbose", False):
        cfg["verbose"] = "true"

    ok, errors = validate(cfg)
    if not ok:
        for err in errors:
            print(f"Config error: {err}", file=sys.stderr)
        sys.exit(2)
    configure_logging(cfg["log_level"])

    if args.command == "serve":
        from .web import app as webapp

        webapp._cfg = cfg
        webapp.serve(args.host, args.port)
        return

    assume_yes = getattr(args, "yes", False)
    if args.command == "check":
        control_id, inputs = None, {}
    elif args.command == "model":
        control_id = "preview-model" if args.preview else "generate-model"
        inputs = _model_inputs(args)
    elif args.command == "preview":
        control_id, inputs = "preview-model", _model_inputs(args)
    elif args.command in ("migration", "seeder", "factory"):
        control_id = f"generate-{args.command}"
        inputs = {f"{args.command}-name": args.name}
    elif args.command == "seed":
        control_id, inputs = "run-seeder-class", {"specific-seeder": args.name}
    elif args.command == "action":
        control_id, inputs = args.action, {}
    else:
        control_id, inputs = "execute-query", {"query-input": args.sql}

    ok = asyncio.run(_run(cfg, control_id, inputs, assume_yes))
    if args.command == "check":
        print("✓ Project configured" if ok else "⚠ tideorm.toml not found")
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()

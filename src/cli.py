# src/cli.py
from __future__ import annotations

import os
import json
import logging
import argparse
import traceback

# ---------------------------
# Commands
# ---------------------------

def cmd_serve(port: int, host: str, debug: bool):
    from devevent import create_app
    app = create_app()
    app.run(host=host, port=port, debug=debug)


def cmd_db_ping() -> None:
    from devevent.db.mongo import ping
    ok = ping()
    print("mongo ping:", "ok" if ok else "failed")
    if not ok:
        raise SystemExit(2)


def cmd_db_ensure_indexes() -> None:
    from devevent.db.mongo import ensure_indexes
    ensure_indexes()
    print("indexes ensured")


def cmd_events_list():
    # Same view the listing endpoint returns, newest first
    from devevent.db.events import EventStore
    from devevent.models.event import serialize_event
    events = [serialize_event(doc) for doc in EventStore().list_recent()]
    print(json.dumps({"ok": True, "count": len(events), "events": events}, indent=2))


def cmd_events_slug(title: str):
    from devevent.utils.slug import generate_slug
    print(generate_slug(title))


# ---------------------------
# Parser / main
# ---------------------------

def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="DevEvent backend CLI")
    sub = p.add_subparsers(dest="cmd", required=True)

    # serve
    sp = sub.add_parser("serve", help="Run Flask server")
    sp.add_argument("--port", type=int, default=int(os.getenv("PORT", "8080")))
    sp.add_argument("--host", default=os.getenv("HOST", "0.0.0.0"))
    sp.add_argument("--debug", action="store_true")
    sp.set_defaults(func=lambda a: cmd_serve(a.port, a.host, a.debug))

    # db
    sc = sub.add_parser("db", help="Database utilities")
    sc_sub = sc.add_subparsers(dest="dbcmd", required=True)
    scp = sc_sub.add_parser("ping", help="Ping MongoDB")
    scp.set_defaults(func=lambda a: cmd_db_ping())
    sci = sc_sub.add_parser("ensure-indexes", help="Create the unique slug / createdAt indexes")
    sci.set_defaults(func=lambda a: cmd_db_ensure_indexes())

    # events
    ev = sub.add_parser("events", help="Inspect stored events")
    ev_sub = ev.add_subparsers(dest="evcmd", required=True)
    evl = ev_sub.add_parser("list", help="Print stored events, newest first")
    evl.set_defaults(func=lambda a: cmd_events_list())
    evs = ev_sub.add_parser("slug", help="Preview the base slug for a title")
    evs.add_argument("title")
    evs.set_defaults(func=lambda a: cmd_events_slug(a.title))

    return p


def main(argv=None):
    from devevent import config
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except SystemExit:
        raise
    except Exception as e:
        # Surface trace on CLI errors
        print("ERROR:", e)
        traceback.print_exc()
        raise SystemExit(1)


if __name__ == "__main__":
    main()

"""Command line entrypoint for the Wardrobe AI app."""

import argparse
import json
import sys
from typing import List, Optional

from wardrobe_app.app import View, WardrobeApp


def _print(payload: object) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _finish(payload: dict) -> int:
    if payload.get("status") == "error":
        print(payload.get("message", "failed"), file=sys.stderr)
        return 1
    _print(payload)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="wardrobe-ai", description="Catalog clothes and get outfit ideas.")
    commands = parser.add_subparsers(dest="command", required=True)

    add = commands.add_parser("add", help="Photograph an item and add it to the wardrobe")
    add.add_argument("image", help="Path to the photo")

    listing = commands.add_parser("list", help="List wardrobe items")
    listing.add_argument("--category", default="ALL")

    delete = commands.add_parser("delete", help="Delete an item by id")
    delete.add_argument("item_id")

    match = commands.add_parser("match", help="Show a top/bottom pairing")
    match.add_argument("--random", action="store_true", help="Pick a random pairing")

    recommend = commands.add_parser("recommend", help="Ask the assistant for an outfit")
    recommend.add_argument("--locate", action="store_true", help="Use live weather at your location")
    recommend.add_argument("--location")
    recommend.add_argument("--temperature", type=float)
    recommend.add_argument("--condition")

    serve = commands.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8080)
    return parser


def main(argv: Optional[List[str]] = None, app: Optional[WardrobeApp] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.command == "serve":
        import uvicorn

        from server.api import create_app

        uvicorn.run(create_app(app), host=args.host, port=args.port)
        return 0

    app = app or WardrobeApp()

    if args.command == "add":
        session = app.open_capture()
        try:
            session.load_image(args.image)
        except OSError as exc:
            print(f"Cannot read {args.image}: {exc}", file=sys.stderr)
            return 2
        analysis = session.analyze()
        if analysis["status"] != "ok":
            return _finish(analysis)
        return _finish(session.save())

    if args.command == "list":
        try:
            app.catalog.set_filter(args.category)
        except ValueError as exc:
            print(str(exc), file=sys.stderr)
            return 2
        _print(app.catalog.render())
        return 0

    if args.command == "delete":
        return _finish(app.catalog.delete(args.item_id))

    if args.command == "match":
        app.navigate(View.MATCHER)
        _print(app.matcher.randomize() if args.random else app.matcher.pair())
        return 0

    app.navigate(View.ASSISTANT)
    if args.locate:
        located = app.assistant.locate()
        if located["status"] == "error":
            return _finish(located)
    else:
        updated = app.assistant.update_weather(
            location=args.location, temperature=args.temperature, condition=args.condition
        )
        if updated["status"] == "error":
            return _finish(updated)
    return _finish(app.assistant.recommend())


if __name__ == "__main__":
    sys.exit(main())

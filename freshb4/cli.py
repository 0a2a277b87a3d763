"""CLI entry point for FreshB4."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from dotenv import load_dotenv

from .ai import create_backend
from .assistant import PantryAssistant, item_from_analysis
from .config import FreshB4Config, load_config
from .db import ItemNotFoundError, PantryDB
from .freshness import status_label
from .models import PantryItem
from .notifications import NotificationPlan, plan_notifications
from .summary import STATS_CARD_POLICY, summarize


def main(argv: list[str] | None = None) -> None:
    load_dotenv()

    parser = argparse.ArgumentParser(
        prog="freshb4",
        description="FreshB4: scan food freshness, track your pantry, cook before it spoils",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to the config file (TOML)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )

    sub = parser.add_subparsers(dest="command")

    sub.add_parser("cameras", help="List available cameras")

    scan_parser = sub.add_parser("scan", help="Photograph food and assess freshness")
    scan_parser.add_argument("--image", type=str, help="Use an existing image file")
    scan_parser.add_argument("--add", action="store_true", help="Add the result to the pantry")
    scan_parser.add_argument("--json", action="store_true", help="Output as JSON")

    add_parser = sub.add_parser("add", help="Add an item to the pantry")
    add_parser.add_argument("name", type=str)
    add_parser.add_argument("--category", type=str, default=None)
    add_parser.add_argument("--days", type=int, default=None, help="Days until spoilage")
    add_parser.add_argument("--notes", type=str, default="")

    update_parser = sub.add_parser("update", help="Update a pantry item")
    update_parser.add_argument("id", type=str)
    update_parser.add_argument("--name", type=str, default=None)
    update_parser.add_argument("--category", type=str, default=None)
    update_parser.add_argument("--days", type=int, default=None)
    update_parser.add_argument("--notes", type=str, default=None)

    remove_parser = sub.add_parser("remove", help="Remove a pantry item")
    remove_parser.add_argument("id", type=str)

    pantry_parser = sub.add_parser("pantry", help="Show pantry items and stats")
    pantry_parser.add_argument("--json", action="store_true", help="Output as JSON")

    alerts_parser = sub.add_parser("alerts", help="Show expiry alerts")
    alerts_parser.add_argument("--json", action="store_true", help="Output as JSON")

    recipes_parser = sub.add_parser("recipes", help="Suggest recipes for expiring items")
    recipes_parser.add_argument("--json", action="store_true", help="Output as JSON")

    sub.add_parser("models", help="List available AI models")
    sub.add_parser("seed", help="Add demo items to the pantry")
    sub.add_parser("watch", help="Run the expiry notification scheduler")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)

    match args.command:
        case "cameras":
            _cmd_cameras()
        case "scan":
            asyncio.run(_cmd_scan(config, args))
        case "add":
            _cmd_add(config, args)
        case "update":
            _cmd_update(config, args)
        case "remove":
            _cmd_remove(config, args)
        case "pantry":
            _cmd_pantry(config, args)
        case "alerts":
            _cmd_alerts(config, args)
        case "recipes":
            asyncio.run(_cmd_recipes(config, args))
        case "models":
            asyncio.run(_cmd_models(config))
        case "seed":
            _cmd_seed(config)
        case "watch":
            try:
                asyncio.run(_cmd_watch(config))
            except KeyboardInterrupt:
                pass


def _open_db(config: FreshB4Config) -> PantryDB:
    return PantryDB(
        config.database.path,
        default_days_left=config.pantry.default_days_left,
        default_category=config.pantry.default_category,
    )


def _assistant(config: FreshB4Config) -> PantryAssistant:
    return PantryAssistant(create_backend(config))


def _load_items(config: FreshB4Config) -> list[PantryItem]:
    db = _open_db(config)
    try:
        return db.get_items()
    finally:
        db.close()


def format_pantry(items: list[PantryItem]) -> str:
    """Format pantry items and stat cards for terminal display."""
    stats = summarize(items, STATS_CARD_POLICY)
    counts = stats.counts()
    lines = [
        f"🧺 {stats.total} items • Track freshness and reduce waste",
        f"   Urgent: {counts['urgent']}   Soon: {counts['soon']}   "
        f"Fresh: {counts['fresh']}   Health: {stats.health_score}%",
        "",
    ]
    for item in items:
        days = item.days_left or 0
        expires = (
            f"  expires {item.expiry_date.date().isoformat()}"
            if days > 0 and item.expiry_date
            else ""
        )
        lines.append(f"  {item.name:<20} {status_label(days):<14} [{item.category}]{expires}")
        if item.notes:
            lines.append(f"      {item.notes}")
        lines.append(f"      id: {item.id}")
    return "\n".join(lines)


def format_alerts(plan: NotificationPlan) -> str:
    """Format the in-app alert banner."""
    lines: list[str] = []
    if plan.expired.count:
        lines.append(f"🚨 Items Spoiled! {plan.expired.message}")
        for item in plan.expired.items:
            lines.append(f"    - {item.name}")
    if plan.expiring.count:
        lines.append(f"⏰ Expiring soon: {plan.expiring.message}")
        for item in plan.expiring.items:
            lines.append(f"    - {item.name} ({status_label(item.days_left or 0)})")
    if not lines:
        lines.append("✅ Nothing needs attention right now.")
    s = plan.summary
    lines.append("")
    lines.append(
        f"Total: {s.total}   Needs attention: {s.needs_attention}   "
        f"Health score: {s.health_score}%"
    )
    return "\n".join(lines)


def _cmd_cameras() -> None:
    from .camera import FoodCamera

    cameras = FoodCamera.list_cameras()
    if not cameras:
        print("No cameras found.")
        return
    print(f"Available cameras: {len(cameras)}")
    for idx in cameras:
        print(f"  camera {idx}")


async def _cmd_scan(config: FreshB4Config, args) -> None:
    if args.image:
        image_path = args.image
    else:
        from .camera import FoodCamera

        camera = FoodCamera(
            camera_index=config.camera.index,
            save_dir=config.camera.save_dir,
        )
        print("📷 Capturing...")
        image_path = camera.capture().image_path

    assistant = _assistant(config)
    db = _open_db(config)
    try:
        print("🔍 Analyzing food freshness...", file=sys.stderr)
        try:
            analysis = await assistant.analyze_food(image_path, db.get_items())
        except OSError as e:
            print(f"Error: could not read image: {e}", file=sys.stderr)
            sys.exit(1)
        if not assistant.live:
            print(
                "ℹ️  No AI backend configured, showing a built-in example result.",
                file=sys.stderr,
            )

        if args.json:
            print(json.dumps(analysis.to_dict(), ensure_ascii=False, indent=2))
        else:
            print(analysis.display())

        if args.add:
            item_id = db.add(item_from_analysis(analysis, image_ref=image_path))
            print(f"\n✓ {analysis.food_type} has been added to your pantry ({item_id})")
    finally:
        db.close()


def _cmd_add(config: FreshB4Config, args) -> None:
    db = _open_db(config)
    try:
        item_id = db.add(
            PantryItem(
                name=args.name,
                category=args.category or config.pantry.default_category,
                days_left=args.days,
                notes=args.notes,
            )
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        db.close()
    print(item_id)


def _cmd_update(config: FreshB4Config, args) -> None:
    patch = {
        key: value
        for key, value in (
            ("name", args.name),
            ("category", args.category),
            ("days_left", args.days),
            ("notes", args.notes),
        )
        if value is not None
    }
    if not patch:
        print("Nothing to update.", file=sys.stderr)
        sys.exit(1)

    db = _open_db(config)
    try:
        db.update(args.id, patch)
    except ItemNotFoundError:
        print(f"No such item: {args.id}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        db.close()


def _cmd_remove(config: FreshB4Config, args) -> None:
    db = _open_db(config)
    try:
        db.delete(args.id)
    finally:
        db.close()


def _cmd_pantry(config: FreshB4Config, args) -> None:
    items = _load_items(config)
    if args.json:
        stats = summarize(items, STATS_CARD_POLICY)
        data = {
            "items": [i.to_dict() for i in items],
            "stats": {**stats.counts(), "total": stats.total},
        }
        print(json.dumps(data, ensure_ascii=False, indent=2))
        return
    if not items:
        print("Your pantry is empty. Scan some food to get started!")
        return
    print(format_pantry(items))


def _cmd_alerts(config: FreshB4Config, args) -> None:
    plan = plan_notifications(_load_items(config))
    if args.json:
        data = {
            name: {
                "count": bucket.count,
                "items": [i.name for i in bucket.items],
                "message": bucket.message,
                "severity": bucket.severity,
            }
            for name, bucket in (
                ("expired", plan.expired),
                ("expiring", plan.expiring),
                ("fresh", plan.fresh),
            )
        }
        data["summary"] = {
            "total": plan.summary.total,
            "needsAttention": plan.summary.needs_attention,
            "healthScore": plan.summary.health_score,
        }
        print(json.dumps(data, ensure_ascii=False, indent=2))
        return
    print(format_alerts(plan))


async def _cmd_recipes(config: FreshB4Config, args) -> None:
    items = _load_items(config)
    assistant = _assistant(config)
    print("🍳 Generating recipes...", file=sys.stderr)
    batch = await assistant.get_recipes(items)
    if not assistant.live:
        print(
            "ℹ️  No AI backend configured, showing built-in example recipes.",
            file=sys.stderr,
        )
    if args.json:
        print(json.dumps(batch.to_dict(), ensure_ascii=False, indent=2))
    else:
        print(batch.display())


async def _cmd_models(config: FreshB4Config) -> None:
    models = await _assistant(config).list_models()
    if not models:
        print("No models available (is an API key configured?)")
        return
    print(f"Available {config.ai.backend} models:")
    for m in models:
        print(f"  - {m.name} ({m.display_name})")


def _cmd_seed(config: FreshB4Config) -> None:
    db = _open_db(config)
    try:
        ids = db.seed_demo_data()
    finally:
        db.close()
    print(f"Demo data seeded: {len(ids)} items")


async def _cmd_watch(config: FreshB4Config) -> None:
    from .monitor import PantryMonitor
    from .scheduler import NotificationScheduler

    db = _open_db(config)
    notifier = NotificationScheduler(permission=config.notifications.enabled)
    monitor = PantryMonitor(db, notifier, config.notifications)
    notifier.add_cron_job(
        monitor.refresh,
        config.notifications.refresh_schedule,
        job_id="pantry_refresh",
        name="Pantry refresh",
    )
    notifier.add_cron_job(
        monitor.poll,
        config.notifications.poll_schedule,
        job_id="pantry_poll",
        name="Pantry change check",
    )
    notifier.start()
    monitor.start()
    print("👀 Watching pantry for expiring items (Ctrl+C to stop)")
    try:
        await asyncio.Event().wait()
    finally:
        monitor.stop()
        notifier.stop()
        db.close()

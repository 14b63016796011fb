# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING
from uuid import UUID

from dotenv import load_dotenv

from dealledger.adapters.sqlalchemy.migrations import upgrade_head
from dealledger.app import (
    adjusted_deal_score,
    consolidate_red_flags_file,
    ingest_claims_file,
    ledger_unit_of_work_factory,
)
from dealledger.config import configure_logging, get_api_config, get_default_user_id
from dealledger.domain import alert_ledger, deals, fact_ledger
from dealledger.domain.alerts import ResolutionRequest, count_resolutions
from dealledger.domain.model import ResolutionStatus, ReviewDecision
from dealledger.ui.api.schema import (
    AdjustedScoreResponse,
    AlertResolutionResponse,
    AlertResolutionsResponse,
    ClaimBatchResponse,
    CurrentFactResponse,
    DealResponse,
    FactEventResponse,
    FactsResponse,
    PendingReviewResponse,
    PendingReviewsResponse,
    RedFlagReviewResponse,
    ResolutionCountsResponse,
    ResolveReviewResponse,
    UnresolveResponse,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from pydantic import BaseModel

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:  # noqa: PLR0915
    parser = argparse.ArgumentParser(description="Deal fact ledger and alert resolutions")
    parser.add_argument(
        "--user",
        type=str,
        help="Acting user id (defaults to DEALLEDGER_USER_ID)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log at DEBUG level",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    db = subparsers.add_parser("db", help="Database schema commands")
    db_sub = db.add_subparsers(dest="db_command", required=True)
    db_upgrade = db_sub.add_parser("upgrade", help="Upgrade the schema to the latest revision")
    db_upgrade.add_argument(
        "--database-uri",
        type=str,
        help="SQLAlchemy URI to upgrade (defaults to DATABASE_URI)",
    )

    deal = subparsers.add_parser("deal", help="Deal management commands")
    deal_sub = deal.add_subparsers(dest="deal_command", required=True)
    deal_create = deal_sub.add_parser("create", help="Create a deal owned by the acting user")
    deal_create.add_argument("--name", type=str, required=True, help="Name of the deal")

    facts = subparsers.add_parser("facts", help="Fact ledger commands")
    facts_sub = facts.add_subparsers(dest="facts_command", required=True)
    facts_ingest = facts_sub.add_parser("ingest", help="Record agent claims from a JSON file")
    facts_ingest.add_argument("--deal", type=str, required=True, help="Deal id")
    facts_ingest.add_argument("file", type=Path, help='JSON file shaped {"claims": [...]}')
    facts_list = facts_sub.add_parser("list", help="Show the current facts of a deal")
    facts_list.add_argument("--deal", type=str, required=True, help="Deal id")
    facts_list.add_argument("--category", type=str, help="Only facts of this category")
    facts_list.add_argument(
        "--history",
        action="store_true",
        help="Include the event history of every fact",
    )
    facts_override = facts_sub.add_parser("override", help="Override a fact with a human value")
    facts_override.add_argument("--deal", type=str, required=True, help="Deal id")
    facts_override.add_argument("--key", type=str, required=True, help="Fact key")
    facts_override.add_argument(
        "--value",
        type=str,
        required=True,
        help="New value: a JSON literal, a grouped number such as '1,200,000', or text",
    )
    facts_override.add_argument("--display-value", type=str, help="Display string to store")
    facts_override.add_argument("--reason", type=str, required=True, help="Why")
    facts_delete = facts_sub.add_parser("delete", help="Delete the current value of a fact")
    facts_delete.add_argument("--deal", type=str, required=True, help="Deal id")
    facts_delete.add_argument("--key", type=str, required=True, help="Fact key")
    facts_delete.add_argument("--reason", type=str, required=True, help="Why")

    reviews = subparsers.add_parser("reviews", help="Pending review commands")
    reviews_sub = reviews.add_subparsers(dest="reviews_command", required=True)
    reviews_list = reviews_sub.add_parser("list", help="List open reviews of a deal")
    reviews_list.add_argument("--deal", type=str, required=True, help="Deal id")
    reviews_resolve = reviews_sub.add_parser("resolve", help="Decide on an open review")
    reviews_resolve.add_argument("--deal", type=str, required=True, help="Deal id")
    reviews_resolve.add_argument("--review", type=str, required=True, help="Review id")
    reviews_resolve.add_argument(
        "--decision",
        type=str,
        required=True,
        choices=[decision.value for decision in ReviewDecision],
        help="Decision to apply",
    )
    reviews_resolve.add_argument("--reason", type=str, help="Why (required for OVERRIDE)")
    reviews_resolve.add_argument("--value", type=str, help="Override value (OVERRIDE only)")
    reviews_resolve.add_argument(
        "--display-value",
        type=str,
        help="Override display value (OVERRIDE only)",
    )

    flags = subparsers.add_parser("flags", help="Red flag commands")
    flags_sub = flags.add_subparsers(dest="flags_command", required=True)
    flags_consolidate = flags_sub.add_parser(
        "consolidate",
        help="Consolidate the red flags of one run from a JSON file",
    )
    flags_consolidate.add_argument("--deal", type=str, required=True, help="Deal id")
    flags_consolidate.add_argument("file", type=Path, help='JSON file shaped {"agents": [...]}')

    alerts = subparsers.add_parser("alerts", help="Alert resolution commands")
    alerts_sub = alerts.add_subparsers(dest="alerts_command", required=True)
    alerts_resolve = alerts_sub.add_parser("resolve", help="Resolve or accept an alert")
    alerts_resolve.add_argument("--deal", type=str, required=True, help="Deal id")
    alerts_resolve.add_argument("--key", type=str, required=True, help="Alert key")
    alerts_resolve.add_argument(
        "--status",
        type=str,
        default=ResolutionStatus.RESOLVED.value,
        choices=[item.value for item in ResolutionStatus],
        help="Resolution status (default: %(default)s)",
    )
    alerts_resolve.add_argument("--justification", type=str, required=True, help="Why")
    alerts_resolve.add_argument("--title", type=str, required=True, help="Alert title")
    alerts_resolve.add_argument("--severity", type=str, help="Alert severity")
    alerts_resolve.add_argument("--category", type=str, help="Alert category")
    alerts_unresolve = alerts_sub.add_parser("unresolve", help="Remove an alert resolution")
    alerts_unresolve.add_argument("--deal", type=str, required=True, help="Deal id")
    alerts_unresolve.add_argument("--key", type=str, required=True, help="Alert key")
    alerts_list = alerts_sub.add_parser("list", help="List the alert resolutions of a deal")
    alerts_list.add_argument("--deal", type=str, required=True, help="Deal id")

    score = subparsers.add_parser("score", help="Adjust a deal score for resolved alerts")
    score.add_argument("--deal", type=str, required=True, help="Deal id")
    score.add_argument("--original", type=float, required=True, help="Original score (0-100)")

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", type=str, help="Bind address (defaults to config)")
    serve.add_argument("--port", type=int, help="Port (defaults to config)")

    return parser.parse_args(list(argv))


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise ValueError(f"Invalid UUID: {value}") from exc


def _emit(payload: BaseModel) -> None:
    print(payload.model_dump_json(by_alias=True, indent=2))


def _user(args: argparse.Namespace) -> str:
    return args.user or get_default_user_id()


def _run_facts(args: argparse.Namespace) -> None:
    deal_id = _parse_uuid(args.deal)
    factory = ledger_unit_of_work_factory()
    if args.facts_command == "ingest":
        result = ingest_claims_file(args.file, deal_id=deal_id, user_id=_user(args))
        _emit(ClaimBatchResponse.from_domain(result))
    elif args.facts_command == "list":
        current = fact_ledger.get_current_facts(
            deal_id=deal_id,
            user_id=_user(args),
            unit_of_work_factory=factory,
            category=fact_ledger.parse_category(args.category),
        )
        _emit(
            FactsResponse(
                deal_id=deal_id,
                facts_count=len(current),
                facts=[
                    CurrentFactResponse.from_domain(fact, include_history=args.history)
                    for fact in current
                ],
            )
        )
    elif args.facts_command == "override":
        event = fact_ledger.override_fact(
            deal_id=deal_id,
            fact_key=args.key,
            value=args.value,
            display_value=args.display_value,
            reason=args.reason,
            user_id=_user(args),
            unit_of_work_factory=factory,
        )
        _emit(FactEventResponse.from_domain(event))
    else:
        event = fact_ledger.delete_fact(
            deal_id=deal_id,
            fact_key=args.key,
            reason=args.reason,
            user_id=_user(args),
            unit_of_work_factory=factory,
        )
        _emit(FactEventResponse.from_domain(event))


def _run_reviews(args: argparse.Namespace) -> None:
    deal_id = _parse_uuid(args.deal)
    factory = ledger_unit_of_work_factory()
    if args.reviews_command == "list":
        open_reviews = fact_ledger.list_pending_reviews(
            deal_id=deal_id, user_id=_user(args), unit_of_work_factory=factory
        )
        _emit(
            PendingReviewsResponse(
                deal_id=deal_id,
                reviews_count=len(open_reviews),
                reviews=[PendingReviewResponse.from_domain(review) for review in open_reviews],
            )
        )
        return

    decision = ReviewDecision(args.decision)
    event = fact_ledger.resolve_pending_review(
        deal_id=deal_id,
        review_id=_parse_uuid(args.review),
        decision=decision,
        reason=args.reason,
        override_value=args.value,
        override_display_value=args.display_value,
        user_id=_user(args),
        unit_of_work_factory=factory,
    )
    _emit(
        ResolveReviewResponse(
            decision=decision,
            event=FactEventResponse.from_domain(event) if event is not None else None,
        )
    )


def _run_alerts(args: argparse.Namespace) -> None:
    deal_id = _parse_uuid(args.deal)
    factory = ledger_unit_of_work_factory()
    if args.alerts_command == "resolve":
        resolution = alert_ledger.resolve_alert(
            deal_id=deal_id,
            request=ResolutionRequest(
                alert_key=args.key,
                status=ResolutionStatus(args.status),
                justification=args.justification,
                alert_title=args.title,
                alert_severity=args.severity,
                alert_category=args.category,
            ),
            user_id=_user(args),
            unit_of_work_factory=factory,
        )
        _emit(AlertResolutionResponse.from_domain(resolution))
    elif args.alerts_command == "unresolve":
        removed = alert_ledger.unresolve_alert(
            deal_id=deal_id, alert_key=args.key, user_id=_user(args), unit_of_work_factory=factory
        )
        _emit(UnresolveResponse(alert_key=args.key, removed=removed))
    else:
        resolutions = alert_ledger.list_alert_resolutions(
            deal_id=deal_id, user_id=_user(args), unit_of_work_factory=factory
        )
        _emit(
            AlertResolutionsResponse(
                deal_id=deal_id,
                resolutions=[AlertResolutionResponse.from_domain(item) for item in resolutions],
                counts=ResolutionCountsResponse.from_domain(count_resolutions(resolutions)),
            )
        )


def _serve(args: argparse.Namespace) -> None:
    import uvicorn  # noqa: PLC0415

    from dealledger.ui.api import create_app  # noqa: PLC0415

    config = get_api_config()
    host = args.host or config.host
    port = args.port or config.port
    log.info("Serving the deal ledger API on %s:%s", host, port)
    uvicorn.run(create_app(), host=host, port=port)


def _run(args: argparse.Namespace) -> None:
    if args.command == "db":
        upgrade_head(database_uri=args.database_uri)
        log.info("Database schema is at the latest revision")
    elif args.command == "deal":
        deal = deals.create_deal(
            name=args.name,
            user_id=_user(args),
            unit_of_work_factory=ledger_unit_of_work_factory(),
        )
        _emit(DealResponse.from_domain(deal))
    elif args.command == "facts":
        _run_facts(args)
    elif args.command == "reviews":
        _run_reviews(args)
    elif args.command == "flags":
        deal_id = _parse_uuid(args.deal)
        review = consolidate_red_flags_file(args.file, deal_id=deal_id, user_id=_user(args))
        _emit(RedFlagReviewResponse.from_domain(deal_id, review))
    elif args.command == "alerts":
        _run_alerts(args)
    elif args.command == "score":
        deal_id = _parse_uuid(args.deal)
        score = adjusted_deal_score(
            deal_id=deal_id, original_score=args.original, user_id=_user(args)
        )
        _emit(AdjustedScoreResponse.from_domain(deal_id, score))
    elif args.command == "serve":
        _serve(args)
    else:
        raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
    except ValueError:
        configure_logging()
        log.exception("CLI validation error")
        sys.exit(2)

    configure_logging(verbose=parsed_args.verbose)
    try:
        _run(parsed_args)
    except ValueError as exc:
        log.error("Invalid input: %s", exc)  # noqa: TRY400
        sys.exit(2)
    except Exception:
        log.exception("Command failed")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import pytest

from dealledger.ui import cli as cli_module
from tests.helpers.facts import OWNER, STRANGER

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from dealledger.adapters.sqlalchemy import SqlAlchemyLedgerUnitOfWork
    from dealledger.domain.model import Deal

    type Factory = Callable[[], SqlAlchemyLedgerUnitOfWork]


def _run(capsys: pytest.CaptureFixture[str], *argv: str) -> dict[str, Any]:
    cli_module.main(["--user", OWNER, *argv])
    return json.loads(capsys.readouterr().out)


def test_deal_create(capsys: pytest.CaptureFixture[str], ledger_unit_of_work: Factory) -> None:
    output = _run(capsys, "deal", "create", "--name", "Acme Seed")

    assert output["name"] == "Acme Seed"
    assert output["ownerId"] == OWNER


def test_user_defaults_to_environment(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    ledger_unit_of_work: Factory,
) -> None:
    monkeypatch.setenv("DEALLEDGER_USER_ID", "analyst-env")

    cli_module.main(["deal", "create", "--name", "Env Deal"])

    assert json.loads(capsys.readouterr().out)["ownerId"] == "analyst-env"


def test_facts_ingest_and_list(
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
    ledger_unit_of_work: Factory,
    deal: Deal,
) -> None:
    claims = tmp_path / "claims.json"
    claims.write_text(
        json.dumps(
            {
                "claims": [
                    {
                        "factKey": "financial.arr",
                        "value": 1_000_000,
                        "source": "PITCH_DECK",
                        "confidence": 70,
                    },
                    {
                        "factKey": "financial.arr",
                        "value": 1_200_000,
                        "source": "FINANCIAL_MODEL",
                        "confidence": 85,
                    },
                ]
            }
        ),
        encoding="utf-8",
    )

    ingested = _run(capsys, "facts", "ingest", "--deal", str(deal.id), str(claims))
    assert ingested["accepted"] == 1
    assert ingested["queued"] == 1

    listed = _run(capsys, "facts", "list", "--deal", str(deal.id), "--history")
    assert listed["factsCount"] == 1
    assert listed["facts"][0]["isDisputed"] is True
    assert len(listed["facts"][0]["eventHistory"]) == 1

    reviews = _run(capsys, "reviews", "list", "--deal", str(deal.id))
    review_id = reviews["reviews"][0]["id"]

    resolved = _run(
        capsys,
        "reviews",
        "resolve",
        "--deal",
        str(deal.id),
        "--review",
        review_id,
        "--decision",
        "ACCEPT_NEW",
    )
    assert resolved["event"]["value"] == 1_200_000


def test_facts_override_and_delete(
    capsys: pytest.CaptureFixture[str], ledger_unit_of_work: Factory, deal: Deal
) -> None:
    override = _run(
        capsys,
        "facts",
        "override",
        "--deal",
        str(deal.id),
        "--key",
        "financial.arr",
        "--value",
        "2500000",
        "--reason",
        "confirmed by CFO",
    )
    assert override["source"] == "BA_OVERRIDE"
    assert override["value"] == 2_500_000

    deleted = _run(
        capsys,
        "facts",
        "delete",
        "--deal",
        str(deal.id),
        "--key",
        "financial.arr",
        "--reason",
        "wrong deal",
    )
    assert deleted["eventType"] == "DELETED"


def test_alerts_and_score(
    capsys: pytest.CaptureFixture[str], ledger_unit_of_work: Factory, deal: Deal
) -> None:
    resolved = _run(
        capsys,
        "alerts",
        "resolve",
        "--deal",
        str(deal.id),
        "--key",
        "RED_FLAG::revenue_metrics",
        "--justification",
        "explained by deferred revenue",
        "--title",
        "ARR/MRR inconsistency",
        "--severity",
        "HIGH",
    )
    assert resolved["status"] == "RESOLVED"

    score = _run(capsys, "score", "--deal", str(deal.id), "--original", "70")
    assert score["adjustedScore"] == 75

    listed = _run(capsys, "alerts", "list", "--deal", str(deal.id))
    assert listed["counts"]["resolved"] == 1

    removed = _run(
        capsys,
        "alerts",
        "unresolve",
        "--deal",
        str(deal.id),
        "--key",
        "RED_FLAG::revenue_metrics",
    )
    assert removed["removed"] is True


def test_flags_consolidate(
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
    ledger_unit_of_work: Factory,
    deal: Deal,
) -> None:
    run = tmp_path / "flags.json"
    run.write_text(
        json.dumps(
            {
                "agents": [
                    {"agentName": "financial", "redFlags": [{"title": "High burn rate"}]},
                    {"agentName": "legal", "redFlags": [{"title": "Patent ownership unclear"}]},
                ]
            }
        ),
        encoding="utf-8",
    )

    output = _run(capsys, "flags", "consolidate", "--deal", str(deal.id), str(run))

    assert output["summary"]["totalRaw"] == 2
    assert output["summary"]["totalConsolidated"] == 2


def test_invalid_uuid_exits_with_usage_error(ledger_unit_of_work: Factory) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["--user", OWNER, "facts", "list", "--deal", "not-a-uuid"])

    assert excinfo.value.code == 2


def test_invalid_decision_is_rejected_by_the_parser(ledger_unit_of_work: Factory) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(
            ["reviews", "resolve", "--deal", "x", "--review", "y", "--decision", "MAYBE"]
        )

    assert excinfo.value.code == 2


def test_foreign_deal_fails(ledger_unit_of_work: Factory, deal: Deal) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["--user", STRANGER, "facts", "list", "--deal", str(deal.id)])

    assert excinfo.value.code == 1


def test_missing_user_fails(monkeypatch: pytest.MonkeyPatch, ledger_unit_of_work: Factory) -> None:
    monkeypatch.delenv("DEALLEDGER_USER_ID", raising=False)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["deal", "create", "--name", "Nobody's deal"])

    assert excinfo.value.code == 1


def test_serve_uses_api_config(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_run(app: object, **kwargs: object) -> None:
        captured["app"] = app
        captured.update(kwargs)

    monkeypatch.setattr("uvicorn.run", fake_run)
    monkeypatch.setenv("DEALLEDGER_API_PORT", "9100")

    cli_module.main(["serve", "--host", "0.0.0.0"])  # noqa: S104

    assert captured["host"] == "0.0.0.0"  # noqa: S104
    assert captured["port"] == 9100
    assert captured["app"] is not None

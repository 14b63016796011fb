from __future__ import annotations

import pytest


@pytest.fixture
def claims_payload() -> dict[str, object]:
    return {
        "claims": [
            {
                "factKey": "financial.arr",
                "value": 1_200_000,
                "source": "FINANCIAL_MODEL",
                "confidence": 85,
                "displayValue": "$1.2M",
                "unit": "USD",
            },
            {
                "factKey": "team.founders",
                "value": ["Ada", "Grace"],
                "source": "PITCH_DECK",
                "confidence": 60,
                "displayValue": "  ",
                "ignored": True,
            },
        ]
    }


@pytest.fixture
def red_flags_payload() -> dict[str, object]:
    return {
        "agents": [
            {
                "agentName": "financial",
                "redFlags": [
                    {
                        "title": "ARR/MRR inconsistency",
                        "severity": "critical",
                        "category": "financial",
                        "evidence": [
                            {"source": "deck p.4", "quote": "ARR $1.2M"},
                            {"source": "model"},
                            "MRR of 50k",
                        ],
                        "questionForFounder": "Which figure is right?",
                    },
                ],
            },
            {
                "agentName": "legal",
                "redFlags": [
                    {"title": "Patent ownership unclear", "severity": "unheard-of"},
                ],
            },
        ]
    }

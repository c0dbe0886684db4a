"""
render_to_dict: JSON-ready report output.
"""

import json
from decimal import Decimal

from ledger_modules.reporting.statements import render_to_dict


class TestRenderToDict:

    def test_trial_balance(self, reporting_service):
        data = reporting_service.to_dict(reporting_service.trial_balance("2024-04-30").report)
        assert data["total_debit"] == "35000.00"
        assert data["is_balanced"] is True
        assert data["metadata"]["report_type"] == "trial_balance"
        assert data["metadata"]["as_of_date"] == "2024-04-30"
        assert data["lines"][0]["account_type"] == "Asset"

    def test_display_balance(self, reporting_service):
        data = reporting_service.to_dict(reporting_service.ledger("1001").report)
        assert data["closing_balance"] == {"amount": "2000.00", "side": "Debit", "label": "2000.00 Dr"}
        assert data["rows"][0]["voucher_type"] == "Payment"

    def test_outcome_is_json_serializable(self, reporting_service):
        data = reporting_service.to_dict(reporting_service.monthly_comparison("2024-25"))
        assert data["status"] == "generated"
        assert len(data["report"]["monthly_income"]) == 12
        json.dumps(data)

    def test_precision(self):
        assert render_to_dict(Decimal("1.005"), 2) == "1.01"
        assert render_to_dict(Decimal("1.005")) == "1.005"
        assert render_to_dict((Decimal("2"),), 0) == ["2"]

    def test_none_preserved(self):
        assert render_to_dict({"a": None}) == {"a": None}

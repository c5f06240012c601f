"""API tests for scoring configuration and evaluation routes."""

from pathlib import Path
import unittest

from fastapi.testclient import TestClient

from loan_risk.core.config import AppSettings
from loan_risk.main import create_app


SEED_PATH = Path(__file__).resolve().parents[1] / "settings" / "seed_profiles.json"

BORROWER = {
    "id": "b-100",
    "name": "Northwind Logistics",
    "loan_type": "general",
    "categories": [
        {
            "id": "creditworthiness",
            "parameters": [
                {"id": "credit-score", "raw_value": 780},
                {"id": "payment-history", "raw_value": 0},
                {"id": "credit-utilization", "raw_value": "18%"},
                {"id": "public-records", "raw_value": 0},
                {"id": "credit-history-age", "raw_value": 14},
            ],
        }
    ],
}


def _settings() -> AppSettings:
    return AppSettings(
        app_name="Loan Risk Test API",
        debug=False,
        host="127.0.0.1",
        port=8000,
        log_level="INFO",
        default_loan_type="general",
        profiles_backend="memory",
        profiles_path="profiles.json",
        seed_profiles_path=str(SEED_PATH),
        approve_min_score=80,
        review_min_score=65,
    )


class ScoringApiTests(unittest.TestCase):
    """Exercise the HTTP surface against an in-memory profile store."""

    def setUp(self) -> None:
        self.client = TestClient(create_app(_settings()))

    def test_health_and_root(self) -> None:
        self.assertEqual(self.client.get("/health").json(), {"status": "ok"})
        self.assertIn("Loan Risk Test API", self.client.get("/").json()["message"])

    def test_configuration_starts_from_preset(self) -> None:
        body = self.client.get("/api/scoring/configuration").json()
        self.assertEqual(body["state"], "no_profile")
        self.assertEqual(body["loan_type"], "general")
        self.assertEqual(body["weights_total"], 100)

    def test_select_loan_type(self) -> None:
        response = self.client.put("/api/scoring/configuration/loan-type", json={"loan_type": "equipment"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["weights"]["equipment"], 20)
        bad = self.client.put("/api/scoring/configuration/loan-type", json={"loan_type": "yacht"})
        self.assertEqual(bad.status_code, 409)

    def test_profile_lifecycle(self) -> None:
        created = self.client.post(
            "/api/scoring/profiles",
            json={"name": "Tight Credit", "weights": {"creditworthiness": 70, "legal": 30}},
        )
        self.assertEqual(created.status_code, 201)
        profile_id = created.json()["id"]
        self.assertEqual(self.client.get("/api/scoring/configuration").json()["profile_id"], profile_id)

        updated = self.client.put("/api/scoring/profiles/{0}".format(profile_id), json={"name": "Renamed"})
        self.assertEqual(updated.status_code, 200)
        self.assertEqual(updated.json()["name"], "Renamed")
        self.assertEqual(updated.json()["version"], 2)

        deleted = self.client.delete("/api/scoring/profiles/{0}".format(profile_id))
        self.assertEqual(deleted.status_code, 200)
        self.assertEqual(deleted.json()["configuration"]["state"], "no_profile")
        self.assertEqual(self.client.get("/api/scoring/profiles/{0}".format(profile_id)).status_code, 404)

    def test_profile_validation_errors(self) -> None:
        response = self.client.post(
            "/api/scoring/profiles",
            json={"name": "Broken", "weights": {"creditworthiness": -5}},
        )
        self.assertEqual(response.status_code, 422)
        self.assertEqual(self.client.post("/api/scoring/profiles/ghost/load").status_code, 404)

    def test_default_profile_cannot_be_deleted(self) -> None:
        response = self.client.delete("/api/scoring/profiles/standard-underwriting")
        self.assertEqual(response.status_code, 409)

    def test_load_and_reset(self) -> None:
        loaded = self.client.post("/api/scoring/profiles/cash-flow-lender/load").json()
        self.assertEqual(loaded["profile_id"], "cash-flow-lender")
        reset = self.client.post("/api/scoring/configuration/reset").json()
        self.assertEqual(reset["state"], "profile_loaded")
        self.assertEqual(reset["profile_id"], "standard-underwriting")
        self.assertEqual(len(self.client.get("/api/scoring/profiles").json()), 4)

    def test_score_with_active_configuration(self) -> None:
        response = self.client.post("/api/scoring/score", json={"borrower": BORROWER})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["scores"], {"creditworthiness": 100, "overall": 100})
        self.assertEqual(body["recommendation"], "approve")
        self.assertEqual(body["defaulted_parameters"], [])

    def test_score_with_overrides(self) -> None:
        response = self.client.post(
            "/api/scoring/score",
            json={"borrower": BORROWER, "loan_type": "equipment"},
        )
        self.assertEqual(response.json()["weights"]["equipment"], 20)
        self.assertEqual(self.client.get("/api/scoring/configuration").json()["loan_type"], "general")
        missing = self.client.post("/api/scoring/score", json={"borrower": BORROWER, "profile_id": "ghost"})
        self.assertEqual(missing.status_code, 404)

    def test_score_rejects_malformed_borrower(self) -> None:
        response = self.client.post("/api/scoring/score", json={"borrower": {"id": "x"}})
        self.assertEqual(response.status_code, 422)

    def test_presets_and_thresholds(self) -> None:
        self.assertEqual(self.client.get("/api/scoring/presets/real_estate").json()["weights"]["property"], 20)
        self.assertEqual(self.client.get("/api/scoring/presets/yacht").status_code, 409)
        rules = self.client.get("/api/scoring/thresholds").json()["rules"]
        self.assertEqual(rules["credit-score"]["good"], {"min": 720.0, "max": 850.0})

    def test_weight_helpers(self) -> None:
        normalized = self.client.post(
            "/api/scoring/weights/normalize",
            json={"weights": {"creditworthiness": 50, "financial": 30}},
        ).json()
        self.assertEqual(normalized["weights_total"], 100)
        rebalanced = self.client.post(
            "/api/scoring/weights/rebalance",
            json={"weights": {"creditworthiness": 50, "financial": 50}, "category": "financial", "value": 20},
        ).json()
        self.assertEqual(rebalanced["weights"], {"creditworthiness": 80, "financial": 20})
        mixed_case = self.client.post(
            "/api/scoring/weights/rebalance",
            json={"weights": {"creditworthiness": 50, "financial": 50}, "category": "Financial", "value": 20},
        )
        self.assertEqual(mixed_case.status_code, 200)
        self.assertEqual(mixed_case.json()["weights"], {"creditworthiness": 80, "financial": 20})
        bad = self.client.post("/api/scoring/weights/normalize", json={"weights": {"creditworthiness": 0}})
        self.assertEqual(bad.status_code, 422)


if __name__ == "__main__":
    unittest.main()

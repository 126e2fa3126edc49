import os
import unittest
from unittest.mock import patch

from fastapi.testclient import TestClient

from receipt_pipeline.core.config import get_settings
from receipt_pipeline.main import app

E2E_RECEIPT = "Cafe Corner\nSubtotal: Rs 100.00\nTax: Rs 10.00\nCash\n12/01/2024"


class ReceiptExtractEndpointTests(unittest.TestCase):
    def setUp(self):
        get_settings.cache_clear()
        self.client = TestClient(app)

    def tearDown(self):
        get_settings.cache_clear()

    @patch.dict(os.environ, {"ENABLE_AI_RECEIPT_EXTRACTION": "false"}, clear=False)
    def test_heuristic_extraction(self):
        resp = self.client.post(
            "/api/v1/receipts/extract",
            json={
                "raw_text": E2E_RECEIPT,
                "canonical_categories": ["Food", "Transport", "Shopping"],
            },
        )
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["amount"], "110.00")
        self.assertEqual(data["date"], "2024-01-12")
        self.assertEqual(data["category"], "Food")
        self.assertEqual(data["paymentMethod"], "Cash")
        self.assertNotIn("payment_method", data)
        self.assertEqual(data["description"], "Cafe Corner")
        self.assertIsNone(data["confidence"])
        self.assertEqual(data["source"], "heuristic")
        self.assertEqual(data["ai_error"], "ai_not_configured")

    @patch.dict(os.environ, {"ENABLE_AI_RECEIPT_EXTRACTION": "false"}, clear=False)
    def test_empty_text_returns_nulls(self):
        resp = self.client.post("/api/v1/receipts/extract", json={"raw_text": ""})
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["source"], "none")
        self.assertIsNone(data["amount"])
        self.assertIsNone(data["category"])

    @patch.dict(os.environ, {"ENABLE_RECEIPT_EXTRACTION": "false"}, clear=False)
    def test_disabled_returns_404(self):
        resp = self.client.post("/api/v1/receipts/extract", json={"raw_text": E2E_RECEIPT})
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["detail"], "Not found")

    def test_invalid_context_rejected(self):
        resp = self.client.post(
            "/api/v1/receipts/extract",
            json={"raw_text": E2E_RECEIPT, "context": "refund"},
        )
        self.assertEqual(resp.status_code, 422)

    def test_health(self):
        resp = self.client.get("/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"status": "ok"})


if __name__ == "__main__":
    unittest.main()

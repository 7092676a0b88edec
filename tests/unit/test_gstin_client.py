import asyncio
import unittest
from unittest.mock import patch

import httpx

from core.config import settings
from core.errors import LookupServiceError, NotFoundError, ValidationError
from services.gstin_client import GstinClient

GSTIN = "27AAPFU0939F1ZV"

SAMPLE = {
    "flag": True,
    "message": "GSTIN found.",
    "data": {
        "gstin": GSTIN,
        "lgnm": "ACME TRADING PRIVATE LIMITED",
        "tradeNam": "ACME TRADERS",
        "sts": "Active",
        "rgdt": "01/07/2017",
        "ctb": "Private Limited Company",
        "dty": "Regular",
        "pradr": {
            "addr": {
                "flno": "2nd Floor",
                "bno": "14",
                "bnm": "Shree Complex",
                "st": "MG Road",
                "loc": "Andheri East",
                "city": "",
                "dst": "Mumbai Suburban",
                "pncd": "400069",
                "stcd": "Maharashtra",
            }
        },
    },
}


def _run(coro):
    return asyncio.run(coro)


class TestGstinClient(unittest.TestCase):
    def _client(self, handler):
        return GstinClient(transport=httpx.MockTransport(handler))

    def test_lookup_maps_fields(self):
        seen = {}

        def handler(request: httpx.Request):
            seen["path"] = request.url.path
            return httpx.Response(200, json=SAMPLE)

        with patch.object(settings, "GSTINCHECK_API_KEY", "test-key"):
            details = _run(self._client(handler).lookup(GSTIN.lower()))

        self.assertEqual(seen["path"], f"/check/test-key/{GSTIN}")
        self.assertEqual(details["trade_name"], "ACME TRADERS")
        self.assertEqual(details["legal_name"], "ACME TRADING PRIVATE LIMITED")
        self.assertEqual(details["address"], "2nd Floor, 14, Shree Complex, MG Road, Andheri East, Mumbai Suburban")
        self.assertEqual(details["state_code"], "27")
        self.assertEqual(details["state_name"], "Maharashtra")
        self.assertEqual(details["pincode"], "400069")
        self.assertEqual(details["status"], "Active")

    def test_not_configured(self):
        with patch.object(settings, "GSTINCHECK_API_KEY", None):
            with self.assertRaises(LookupServiceError) as ctx:
                _run(GstinClient().lookup(GSTIN))
        self.assertEqual(ctx.exception.status_code, 503)

    def test_upstream_error(self):
        def handler(request):
            return httpx.Response(500, text="boom")

        with patch.object(settings, "GSTINCHECK_API_KEY", "k"):
            with self.assertRaises(LookupServiceError) as ctx:
                _run(self._client(handler).lookup(GSTIN))
        self.assertEqual(ctx.exception.status_code, 502)

    def test_not_found(self):
        def handler(request):
            return httpx.Response(200, json={"flag": False, "message": "Invalid GSTIN"})

        with patch.object(settings, "GSTINCHECK_API_KEY", "k"):
            with self.assertRaises(NotFoundError):
                _run(self._client(handler).lookup(GSTIN))

    def test_bad_format_never_calls_upstream(self):
        def handler(request):
            raise AssertionError("should not be called")

        with patch.object(settings, "GSTINCHECK_API_KEY", "k"):
            with self.assertRaises(ValidationError):
                _run(self._client(handler).lookup("12345"))


if __name__ == "__main__":
    unittest.main()

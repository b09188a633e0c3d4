from __future__ import annotations

import unittest

from fastapi.testclient import TestClient

from bytetape.service import create_app


class ServiceValidateTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = TestClient(create_app())

    def test_valid_program(self) -> None:
        response = self.client.post("/api/validate", json={"code": "+[->[-]<]"})
        self.assertEqual(response.status_code, 200, response.text)
        self.assertEqual(response.json(), {"valid": True, "jump_count": 2})

    def test_unmatched_close(self) -> None:
        response = self.client.post("/api/validate", json={"code": "+\n+]"})
        self.assertEqual(response.status_code, 422, response.text)
        detail = response.json()["detail"]
        self.assertEqual(detail["error"], "UnmatchedClose")
        self.assertEqual(detail["line"], 2)
        self.assertEqual(detail["column"], 2)

    def test_unmatched_open(self) -> None:
        response = self.client.post("/api/validate", json={"code": "[[["})
        self.assertEqual(response.status_code, 422, response.text)
        detail = response.json()["detail"]
        self.assertEqual(detail["error"], "UnmatchedOpen")
        self.assertEqual(detail["count"], 3)


class ServiceRunTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = TestClient(create_app(max_tape_length=1000))

    def _run(self, **payload):
        return self.client.post("/api/run", json=payload)

    def test_run_returns_output(self) -> None:
        response = self._run(code=",+.,+.", input="HI")
        self.assertEqual(response.status_code, 200, response.text)
        payload = response.json()
        self.assertEqual(payload["output"], [73, 74])
        self.assertEqual(payload["text"], "IJ")
        self.assertEqual(payload["warnings"], [])

    def test_strict_arithmetic_warnings(self) -> None:
        response = self._run(code="-.", strict_arithmetic=True)
        self.assertEqual(response.status_code, 200, response.text)
        payload = response.json()
        self.assertEqual(payload["output"], [255])
        self.assertEqual(payload["warnings"], [{"pc": 0, "pointer": 0, "kind": "underflow"}])

    def test_validation_error(self) -> None:
        response = self._run(code="]")
        self.assertEqual(response.status_code, 422, response.text)
        self.assertEqual(response.json()["detail"]["error"], "UnmatchedClose")

    def test_step_limit_conflict(self) -> None:
        response = self._run(code="+[]", max_steps=100)
        self.assertEqual(response.status_code, 409, response.text)
        self.assertIn("detail", response.json())

    def test_tape_underflow_keeps_partial_output(self) -> None:
        response = self._run(code="+.<")
        self.assertEqual(response.status_code, 409, response.text)
        detail = response.json()["detail"]
        self.assertEqual(detail["error"], "TapeUnderflow")
        self.assertEqual(detail["output"], [1])

    def test_wrap_pointer(self) -> None:
        response = self._run(code=">>+.", tape_length=2, wrap_pointer=True)
        self.assertEqual(response.status_code, 200, response.text)
        self.assertEqual(response.json()["output"], [1])

    def test_zero_tape_length_rejected(self) -> None:
        response = self._run(code="+", tape_length=0)
        self.assertEqual(response.status_code, 422, response.text)

    def test_tape_length_cap(self) -> None:
        response = self._run(code="+", tape_length=5000)
        self.assertEqual(response.status_code, 422, response.text)

    def test_omitted_tape_length_follows_cap(self) -> None:
        client = TestClient(create_app(max_tape_length=4))
        fits = client.post("/api/run", json={"code": ">>>+."})
        self.assertEqual(fits.status_code, 200, fits.text)
        self.assertEqual(fits.json()["output"], [1])
        overflow = client.post("/api/run", json={"code": ">>>>"})
        self.assertEqual(overflow.status_code, 409, overflow.text)
        self.assertEqual(overflow.json()["detail"]["error"], "TapeOverflow")


class ServiceTapeLimitTests(unittest.TestCase):
    def test_default_app_caps_tape_length(self) -> None:
        client = TestClient(create_app())
        response = client.post("/api/run", json={"code": "+", "tape_length": 10**20})
        self.assertEqual(response.status_code, 422, response.text)
        self.assertIn("must not exceed", response.json()["detail"])

    def test_default_app_runs_with_default_tape(self) -> None:
        client = TestClient(create_app())
        response = client.post("/api/run", json={"code": "+."})
        self.assertEqual(response.status_code, 200, response.text)
        self.assertEqual(response.json()["output"], [1])

    def test_unallocatable_tape_is_rejected(self) -> None:
        client = TestClient(create_app(max_tape_length=None))
        response = client.post("/api/run", json={"code": "+", "tape_length": 10**20})
        self.assertEqual(response.status_code, 422, response.text)
        self.assertIn("Cannot allocate", response.json()["detail"])


if __name__ == "__main__":
    unittest.main()

"""Tests for the inspection/control API and the EngineManager behind it."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import unittest

from fastapi.testclient import TestClient

from dessim.api.app import create_app
from dessim.api.engine_manager import EngineManager
from dessim.config import SimulationConfig
from dessim.core.exceptions import ModelError
from tests.helpers.models import bank, jammed


def _quiet_config(**overrides) -> SimulationConfig:
    return SimulationConfig(log_level="WARNING", **overrides)


class TestEngineManager(unittest.TestCase):

    def setUp(self):
        self.mgr = EngineManager(_quiet_config(), bank)

    def test_initial_snapshot(self):
        snap = self.mgr.get_snapshot()
        self.assertEqual(snap.now, 0.0)
        self.assertEqual(snap.queued, 5)
        self.assertEqual(snap.resource("counter").capacity, 2)

    def test_step_counts(self):
        self.assertTrue(self.mgr.step())
        self.assertEqual(self.mgr.steps, 1)

    def test_run_and_reset(self):
        self.assertEqual(self.mgr.run(2.5), 2.5)
        counter = self.mgr.get_snapshot().resource("counter")
        self.assertEqual(counter.count, 2)
        self.assertEqual(counter.waiting, 1)

        self.mgr.reset()
        self.assertEqual(self.mgr.get_snapshot().now, 0.0)
        self.assertEqual(self.mgr.get_events(), [])

    def test_drain(self):
        self.mgr.run()
        counter = self.mgr.get_snapshot().resource("counter")
        self.assertEqual(counter.count, 0)
        self.assertEqual(self.mgr.get_snapshot().queued, 0)

    def test_run_into_past_rejected(self):
        self.mgr.run(3.0)
        with self.assertRaises(ValueError):
            self.mgr.run(3.0)

    def test_model_failure_wrapped(self):
        mgr = EngineManager(_quiet_config(), jammed)
        # Start the operator, then fire its timeout; the crash is on the resume.
        self.assertTrue(mgr.step())
        self.assertTrue(mgr.step())
        with self.assertRaises(ModelError) as ctx:
            mgr.step()
        self.assertIn("conveyor jammed", str(ctx.exception))
        self.assertIsInstance(ctx.exception.__cause__, RuntimeError)

        mgr.reset()
        with self.assertRaises(ModelError):
            mgr.run(5.0)

    def test_default_resource_names_survive_reset(self):
        mgr = EngineManager(_quiet_config(), jammed)
        self.assertIsNotNone(mgr.get_snapshot().resource("resource-1"))
        mgr.reset()
        mgr.reset()
        self.assertIsNotNone(mgr.get_snapshot().resource("resource-1"))

    def test_step_without_model(self):
        mgr = EngineManager(_quiet_config())
        self.assertFalse(mgr.step())


class TestRoutes(unittest.TestCase):

    def test_state_and_resources(self):
        with TestClient(create_app(_quiet_config(), bank)) as client:
            resp = client.post("/api/v1/run", params={"until": 2.5})
            self.assertEqual(resp.status_code, 200)
            self.assertEqual(resp.json()["now"], 2.5)

            state = client.get("/api/v1/state").json()
            self.assertEqual(state["now"], 2.5)
            self.assertEqual(state["seed"], 42)
            (counter,) = state["resources"]
            self.assertEqual(counter["count"], 2)
            self.assertEqual(counter["waiting"], 1)
            self.assertEqual(counter["utilization"], 1.0)
            self.assertEqual(counter["holders"], ["customer-0", "customer-1"])

            one = client.get("/api/v1/resources/counter").json()
            self.assertEqual(one["name"], "counter")

            missing = client.get("/api/v1/resources/vault")
            self.assertEqual(missing.status_code, 404)

    def test_run_into_past_rejected(self):
        with TestClient(create_app(_quiet_config(), bank)) as client:
            client.post("/api/v1/run", params={"until": 3})
            resp = client.post("/api/v1/run", params={"until": 1})
            self.assertEqual(resp.status_code, 400)

    def test_events(self):
        with TestClient(create_app(_quiet_config(), bank)) as client:
            client.post("/api/v1/run", params={"until": 2.5})
            events = client.get("/api/v1/events", params={"resource": "counter"}).json()
            self.assertEqual(
                [e["category"] for e in events],
                ["request", "admit", "request", "admit", "request"],
            )
            later = client.get("/api/v1/events", params={"since": 1.5}).json()
            self.assertEqual([e["time"] for e in later], [2.0])

    def test_step_and_reset(self):
        with TestClient(create_app(_quiet_config(), bank)) as client:
            resp = client.post("/api/v1/control/step").json()
            self.assertEqual(resp["status"], "ok")
            self.assertEqual(client.get("/api/v1/state").json()["steps"], 1)

            client.post("/api/v1/run", params={"until": 4})
            resp = client.post("/api/v1/control/reset").json()
            self.assertEqual(resp["now"], 0.0)
            self.assertEqual(client.get("/api/v1/state").json()["steps"], 0)

    def test_step_with_nothing_scheduled(self):
        with TestClient(create_app(_quiet_config())) as client:
            resp = client.post("/api/v1/control/step").json()
            self.assertEqual(resp["status"], "noop")

    def test_model_failure_during_run(self):
        with TestClient(create_app(_quiet_config(), jammed)) as client:
            resp = client.post("/api/v1/run", params={"until": 5})
            self.assertEqual(resp.status_code, 500)
            self.assertIn("conveyor jammed", resp.json()["detail"])

            client.post("/api/v1/control/reset")
            press = client.get("/api/v1/resources/resource-1")
            self.assertEqual(press.status_code, 200)

    def test_model_failure_during_step(self):
        with TestClient(create_app(_quiet_config(), jammed)) as client:
            for _ in range(2):
                self.assertEqual(client.post("/api/v1/control/step").status_code, 200)
            resp = client.post("/api/v1/control/step")
            self.assertEqual(resp.status_code, 500)
            self.assertIn("conveyor jammed", resp.json()["detail"])

    def test_unknown_action(self):
        with TestClient(create_app(_quiet_config())) as client:
            resp = client.post("/api/v1/control/explode")
            self.assertEqual(resp.status_code, 422)

    def test_config(self):
        with TestClient(create_app(_quiet_config(seed=11))) as client:
            cfg = client.get("/api/v1/config").json()
            self.assertEqual(cfg["seed"], 11)
            self.assertEqual(cfg["log_level"], "WARNING")


if __name__ == "__main__":
    unittest.main()

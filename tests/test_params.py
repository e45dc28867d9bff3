"""
Unit tests for controller parameter stores and schema upgrades.
Run from project root: python -m pytest tests/ -v
Or: python -m unittest discover -s tests -p "test_*.py" -v
"""
import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


class TestParameterStore(unittest.TestCase):

    def _store(self):
        from motionrig.controllers.params import ParameterSpec, ParameterStore

        store = ParameterStore(owner="Controller")
        store.initialize([
            ParameterSpec("Grow Duration", default=2),
            ParameterSpec("Start Pos", "point2", (960, 0)),
        ])
        return store

    def test_initialize_creates_every_entry_in_order(self):
        store = self._store()
        self.assertEqual(store.names(), ["Grow Duration", "Start Pos"])
        self.assertEqual(store.get("Grow Duration"), 2.0)
        self.assertEqual(store.get("Start Pos"), (960.0, 0.0))

    def test_get_missing_raises_not_found(self):
        from motionrig.errors import NotFound, ParameterNotFound

        store = self._store()
        with self.assertRaises(ParameterNotFound) as ctx:
            store.get("Max Radius")
        self.assertIsInstance(ctx.exception, NotFound)
        self.assertIn("Max Radius", str(ctx.exception))

    def test_set_coerces_to_type(self):
        store = self._store()
        store.set("Start Pos", [100, 50, 7])
        self.assertEqual(store.get("Start Pos"), (100.0, 50.0))
        store.set("Grow Duration", 3)
        self.assertIsInstance(store.get("Grow Duration"), float)

    def test_set_default_if_missing_adds_absent(self):
        from motionrig.controllers.params import ParameterSpec

        store = self._store()
        changed = store.set_default_if_missing(ParameterSpec("Max Radius", default=200))
        self.assertTrue(changed)
        self.assertEqual(store.get("Max Radius"), 200.0)

    def test_overwrite_policy_resets_customized_value(self):
        from motionrig.controllers.params import ParameterSpec

        store = self._store()
        store.set("Grow Duration", 5)
        changed = store.set_default_if_missing(ParameterSpec("Grow Duration", default=2), "overwrite")
        self.assertTrue(changed)
        self.assertEqual(store.get("Grow Duration"), 2.0)

    def test_preserve_policy_keeps_user_value(self):
        from motionrig.controllers.params import ParameterSpec

        store = self._store()
        store.set("Grow Duration", 5)
        spec = ParameterSpec("Grow Duration", default=2, legacy_defaults=(1,))
        changed = store.set_default_if_missing(spec, "preserve-if-customized")
        self.assertFalse(changed)
        self.assertEqual(store.get("Grow Duration"), 5.0)

    def test_preserve_policy_upgrades_legacy_default(self):
        from motionrig.controllers.params import ParameterSpec

        store = self._store()
        store.set("Grow Duration", 1)
        spec = ParameterSpec("Grow Duration", default=2, legacy_defaults=(1,))
        self.assertTrue(store.set_default_if_missing(spec, "preserve-if-customized"))
        self.assertEqual(store.get("Grow Duration"), 2.0)

    def test_unchanged_default_is_idempotent(self):
        from motionrig.controllers.params import ParameterSpec

        store = self._store()
        spec = ParameterSpec("Grow Duration", default=2)
        self.assertFalse(store.set_default_if_missing(spec, "overwrite"))
        self.assertFalse(store.set_default_if_missing(spec, "preserve-if-customized"))

    def test_round_trip_dict(self):
        from motionrig.controllers.params import ParameterStore

        store = self._store()
        restored = ParameterStore.from_dict("Controller", store.to_dict())
        self.assertEqual(restored.get("Start Pos"), (960.0, 0.0))
        self.assertEqual(restored.names(), store.names())

    def test_unknown_type_rejected(self):
        from motionrig.controllers.params import ParameterSpec

        with self.assertRaises(ValueError):
            ParameterSpec("Bad", "color")


if __name__ == "__main__":
    unittest.main()

"""
Unit tests for the controller registry: unique naming, lookup, schemas, events.
Run from project root: python -m pytest tests/ -v
"""
import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


class TestControllerRegistry(unittest.TestCase):

    def setUp(self):
        from motionrig.controllers.registry import ControllerRegistry
        from motionrig.scene.memory import MemoryComposition

        self.comp = MemoryComposition()
        self.comp.add_layer("Dot", position=(100, 100))
        self.registry = ControllerRegistry()

    def test_create_unique_names_are_distinct_and_first_is_controller(self):
        names = [self.registry.create_unique(self.comp, "circular").name for _ in range(5)]
        self.assertEqual(names[0], "Controller")
        self.assertEqual(names, ["Controller", "Controller 1", "Controller 2", "Controller 3", "Controller 4"])
        self.assertEqual(len(set(names)), 5)

    def test_unique_name_fills_first_gap(self):
        self.registry.create_unique(self.comp)
        self.registry.create_unique(self.comp)
        self.registry.create_unique(self.comp)
        self.registry.delete(self.comp, "Controller 1")
        self.assertEqual(self.registry.unique_name(self.comp), "Controller 1")

    def test_exists_by_name_checks_every_layer(self):
        self.assertTrue(self.registry.exists_by_name(self.comp, "Dot"))
        self.assertFalse(self.registry.exists_by_name(self.comp, "dot"))

    def test_created_controller_has_full_schema_and_label(self):
        from motionrig.controllers.kinds import CIRCULAR

        layer = self.registry.create_unique(self.comp, "circular")
        self.assertTrue(layer.is_null)
        self.assertEqual(layer.label, 9)
        self.assertEqual(layer.effects.names(), [s.name for s in CIRCULAR.schema])
        self.assertAlmostEqual(layer.effects.get("Revolutions Per Second"), 0.1)

    def test_find_all_is_top_to_bottom_prefix_match(self):
        a = self.registry.create_unique(self.comp)
        b = self.registry.create_unique(self.comp)
        self.comp.add_layer("Controllers Note")  # prefix match counts
        found = [layer.name for layer in self.registry.find_all(self.comp)]
        # nulls are added at the top, so the newest controller comes first
        self.assertEqual(found, [b.name, a.name, "Controllers Note"])
        self.assertEqual(found, [layer.name for layer in self.registry.find_all(self.comp)])

    def test_most_recent_is_last_in_layer_order(self):
        self.assertIsNone(self.registry.most_recent(self.comp))
        self.registry.create_unique(self.comp)
        self.registry.create_unique(self.comp)
        self.assertEqual(self.registry.most_recent(self.comp).name, "Controller")

    def test_find_or_create_reuses_exact_name(self):
        first = self.registry.find_or_create(self.comp, "grid")
        second = self.registry.find_or_create(self.comp, "grid")
        self.assertIs(first, second)
        self.assertEqual(first.name, "Controller")
        self.assertFalse(first.motion_blur)
        self.assertEqual(len(self.registry.find_all(self.comp)), 1)

    def test_find_or_create_upgrades_missing_parameters(self):
        layer = self.registry.find_or_create(self.comp, "y_driven")
        layer.effects._params.pop("Max Value")
        self.registry.find_or_create(self.comp, "y_driven")
        self.assertEqual(layer.effects.get("Max Value"), 100.0)

    def test_find_or_create_respects_preserve_policy(self):
        from motionrig.controllers.registry import ControllerRegistry

        registry = ControllerRegistry({"controllers": {"schema_policy": "preserve-if-customized"}})
        layer = registry.find_or_create(self.comp, "y_driven")
        layer.effects.set("Max Value", 250)
        registry.find_or_create(self.comp, "y_driven")
        self.assertEqual(layer.effects.get("Max Value"), 250.0)

    def test_unknown_kind(self):
        from motionrig.errors import UnknownControllerKind

        with self.assertRaises(UnknownControllerKind):
            self.registry.create_unique(self.comp, "spiral")

    def test_listeners_receive_events(self):
        events = []
        self.registry.subscribe(events.append)
        self.registry.create_unique(self.comp)
        self.registry.delete(self.comp, "Controller")
        self.assertEqual([e.reason for e in events], ["created", "deleted"])
        self.assertEqual(events[0].names, ("Controller",))
        self.registry.unsubscribe(events.append)
        self.registry.create_unique(self.comp)
        self.assertEqual(len(events), 2)

    def test_failing_listener_does_not_break_creation(self):
        def broken(_event):
            raise RuntimeError("panel gone")

        self.registry.subscribe(broken)
        with self.assertLogs("motionrig.controllers.registry", level="ERROR"):
            layer = self.registry.create_unique(self.comp)
        self.assertEqual(layer.name, "Controller")

    def test_delete_non_controller_raises(self):
        from motionrig.errors import HostError

        with self.assertRaises(HostError):
            self.registry.delete(self.comp, "Dot")


if __name__ == "__main__":
    unittest.main()

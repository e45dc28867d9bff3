"""
Unit tests for binding records and the binding resolver.
Run from project root: python -m pytest tests/ -v
"""
import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def _scene():
    from motionrig.scene.memory import MemoryComposition

    comp = MemoryComposition(width=1920, height=1080)
    a = comp.add_layer("A", position=(100, 100))
    b = comp.add_layer("B", position=(200, 100))
    c = comp.add_layer("C", position=(300, 100))
    return comp, a, b, c


class TestBindingTable(unittest.TestCase):

    def test_one_binding_per_slot(self):
        from motionrig.binding.records import Binding, BindingTable

        table = BindingTable()
        self.assertIsNone(table.put(Binding(1, "Controller", "position", "circular")))
        previous = table.put(Binding(1, "Controller 1", "position", "circular"))
        self.assertEqual(previous.controller_name, "Controller")
        self.assertEqual(len(table), 1)
        self.assertEqual(table.get(1, "position").controller_name, "Controller 1")

    def test_remove_all_slots_of_consumer(self):
        from motionrig.binding.records import Binding, BindingTable

        table = BindingTable([
            Binding(1, "Controller", "position", "circular"),
            Binding(1, "Controller", "scale", "circular"),
            Binding(2, "Controller", "scale", "circular"),
        ])
        removed = table.remove(1)
        self.assertEqual(len(removed), 2)
        self.assertEqual(table.consumer_ids(), {2})

    def test_list_round_trip(self):
        from motionrig.binding.records import Binding, BindingTable

        table = BindingTable([Binding(3, "Controller", "scale", "y_driven", 0.5)])
        restored = BindingTable.from_list(table.to_list())
        self.assertEqual(restored.get(3, "scale"), Binding(3, "Controller", "scale", "y_driven", 0.5))


class TestBindingResolver(unittest.TestCase):

    def setUp(self):
        from motionrig.binding.resolver import BindingResolver

        self.comp, self.a, self.b, self.c = _scene()
        self.resolver = BindingResolver()
        self.ctrl = self.resolver.registry.create_unique(self.comp, "circular")
        self.other = self.resolver.registry.create_unique(self.comp, "circular")

    def test_count_after_bind(self):
        result = self.resolver.bind(self.comp, [self.a, self.b], self.ctrl, "circular")
        self.assertEqual(result.applied_count, 2)
        self.assertEqual(self.resolver.count_bound(self.comp, self.ctrl.name), 2)
        self.assertEqual(self.resolver.count_bound(self.comp, self.other.name), 0)

    def test_bind_writes_position_and_scale_text(self):
        self.resolver.bind(self.comp, [self.a], self.ctrl, "circular")
        self.assertIn('thisComp.layer("Controller")', self.comp.get_formula(self.a, "position"))
        self.assertIn("[scale, scale];", self.comp.get_formula(self.a, "scale"))
        self.assertEqual(len(self.comp.bindings.for_consumer(self.a.layer_id)), 2)

    def test_rebind_overwrites(self):
        self.resolver.bind(self.comp, [self.a], self.ctrl, "circular")
        self.resolver.bind(self.comp, [self.a], self.other, "circular")
        self.assertEqual(self.resolver.count_bound(self.comp, self.ctrl.name), 0)
        self.assertEqual(self.resolver.count_bound(self.comp, self.other.name), 1)
        self.assertNotIn('thisComp.layer("Controller")', self.comp.get_formula(self.a, "position"))

    def test_count_sees_text_only_bindings(self):
        from motionrig.formulas.synth import circular_position

        self.comp.set_formula(self.c, "position", circular_position(self.other.name))
        self.assertEqual(self.resolver.count_bound(self.comp, self.other.name), 1)

    def test_labels_and_resolution(self):
        self.resolver.bind(self.comp, [self.a, self.b, self.c], self.ctrl, "circular")
        labels = self.resolver.list_labels(self.comp)
        self.assertEqual(labels, ["Controller 1 (0 layers)", "Controller (3 layers)"])
        self.assertIs(self.resolver.resolve_selection(self.comp, "Controller (3 layers)"), self.ctrl)
        self.assertIs(self.resolver.resolve_selection(self.comp, "Controller 1"), self.other)

    def test_resolve_unknown_label(self):
        from motionrig.errors import ControllerNotFound

        with self.assertRaises(ControllerNotFound) as ctx:
            self.resolver.resolve_selection(self.comp, "Controller 9 (2 layers)")
        self.assertEqual(ctx.exception.name, "Controller 9")

    def test_selected_consumers_requires_selection(self):
        from motionrig.errors import NoSelection

        with self.assertRaises(NoSelection):
            self.resolver.selected_consumers(self.comp)
        self.comp.select([self.b])
        self.assertEqual(self.resolver.selected_consumers(self.comp), [self.b])

    def test_failure_on_one_layer_does_not_stop_batch(self):
        from motionrig.errors import PropertyUnavailable

        no_scale = self.comp.add_layer("Audio", slots=("position",))
        result = self.resolver.bind(self.comp, [self.a, no_scale, self.b], self.ctrl, "circular")
        self.assertEqual(result.applied, ["A", "B"])
        self.assertEqual(result.failures[0][0], "Audio")
        self.assertEqual(self.comp.get_formula(no_scale, "position"), "")
        with self.assertRaises(PropertyUnavailable):
            self.resolver.bind_one(self.comp, no_scale, self.ctrl, "circular")

    def test_controller_cannot_bind_to_itself(self):
        result = self.resolver.bind(self.comp, [self.ctrl, self.a], self.ctrl, "circular")
        self.assertEqual(result.applied, ["A"])
        self.assertEqual(len(result.failures), 1)

    def test_grid_position_only_on_3d_layers(self):
        flat = self.comp.add_layer("Flat", position=(10, 10))
        deep = self.comp.add_layer("Deep", position=(10, 10, 0), three_d=True)
        grid = self.resolver.registry.find_or_create(self.comp, "grid", "Controller Grid")
        self.resolver.bind(self.comp, [flat, deep], grid, "grid")
        self.assertEqual(self.comp.get_formula(flat, "position"), "")
        self.assertIn("value + [0, 0, dist / zOffset * 100] : value;", self.comp.get_formula(deep, "position"))
        self.assertIn("ease(dist, 0, maxDist, maxScale, minScale)", self.comp.get_formula(flat, "scale"))

    def test_unbind_clears_text_and_records(self):
        self.resolver.bind(self.comp, [self.a], self.ctrl, "circular")
        self.resolver.unbind(self.comp, self.a)
        self.assertEqual(self.a.formulas, {})
        self.assertEqual(self.comp.bindings.for_consumer(self.a.layer_id), [])
        self.assertFalse(self.resolver.is_bound(self.comp, self.a))


if __name__ == "__main__":
    unittest.main()

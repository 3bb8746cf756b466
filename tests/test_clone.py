import unittest
from datetime import date, datetime, time, timezone
from decimal import Decimal
from shapemap.mapper.clone import CircularReferenceError, CloneContext


class Opaque:
    pass


class TestCloneContext(unittest.TestCase):
    def setUp(self):
        self.ctx = CloneContext(deep=True)

    def test_shallow_returns_same_object(self):
        value = {'a': [1]}
        self.assertIs(CloneContext(deep=False).clone(value), value)

    def test_atomic_values(self):
        for v in (None, True, 3, 2.5, 'x', b'y', Decimal('1.1')):
            self.assertIs(self.ctx.clone(v), v)

    def test_dates_are_new_instances(self):
        dt = datetime(2024, 1, 1, 12, 30, tzinfo=timezone.utc)
        d = date(2024, 1, 1)
        t = time(8, 15, 1)
        for v in (dt, d, t):
            out = self.ctx.clone(v)
            self.assertEqual(out, v)
            self.assertIsNot(out, v)
            self.assertIs(type(out), type(v))
        self.assertEqual(self.ctx.clone(dt).tzinfo, timezone.utc)

    def test_date_subclasses_kept(self):
        class Stamp(datetime):
            pass

        class Day(date):
            pass

        for v in (Stamp(2024, 5, 6, 7, 8, 9, 123456), Day(2024, 5, 6)):
            out = self.ctx.clone(v)
            self.assertIs(type(out), type(v))
            self.assertEqual(out, v)
            self.assertIsNot(out, v)

    def test_containers(self):
        src = {'l': [1, {'x': 2}], 't': (1, [2])}
        out = self.ctx.clone(src)
        self.assertEqual(out, src)
        self.assertIsNot(out['l'][1], src['l'][1])
        self.assertIsInstance(out['t'], tuple)
        self.assertIsNot(out['t'][1], src['t'][1])

    def test_opaque_objects_shared(self):
        o = Opaque()
        self.assertIs(self.ctx.clone({'o': o})['o'], o)

    def test_cycle_raises(self):
        a = {}
        b = {'a': a}
        a['b'] = b
        with self.assertRaises(CircularReferenceError):
            self.ctx.clone(a)

    def test_active_set_released_after_error(self):
        a = []
        a.append(a)
        with self.assertRaises(CircularReferenceError):
            self.ctx.clone(a)
        self.assertEqual(self.ctx.depth, 0)

    def test_visiting_is_noop_when_shallow(self):
        ctx = CloneContext(deep=False)
        value = {}
        with ctx.visiting(value):
            with ctx.visiting(value):
                self.assertEqual(ctx.depth, 0)

    def test_error_is_value_error(self):
        self.assertTrue(issubclass(CircularReferenceError, ValueError))


if __name__ == '__main__':
    unittest.main()

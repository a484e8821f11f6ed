import unittest
from allotment.devices import Device
from allotment.devices.lib import ParentList


class ParentListTestCase(unittest.TestCase):

    def test_parent_list(self):
        items = list(range(5))
        length = len(items)
        pl = ParentList(items=items)
        self.assertEqual(len(pl), length)
        self.assertEqual(list(pl), items)

        self.assertEqual(hasattr(pl, "index"), False)
        self.assertEqual(hasattr(pl, "insert"), False)
        self.assertEqual(hasattr(pl, "pop"), False)

        self.assertEqual(pl[:], pl.items)

        with self.assertRaises(TypeError):
            pl[2] = 99  # pylint: disable=unsupported-assignment-operation

        # members are unique
        with self.assertRaises(ValueError):
            pl.append(2)
        with self.assertRaises(ValueError):
            pl.remove(42)

        pl.append(99)
        length += 1
        self.assertEqual(len(pl), length)
        self.assertEqual(99 in pl, True)

        pl.remove(3)
        length -= 1
        self.assertEqual(len(pl), length)
        self.assertEqual(3 in pl, False)

        #
        # verify that add/remove functions work as expected
        #
        def pre_add(item):
            if item > 32:
                raise ValueError("only numbers less than 32 are allowed")

        def pre_remove(item):
            # pylint: disable=unused-argument
            if len(pl) - 1 < 3:
                raise RuntimeError("list can never have fewer than 3 items")

        pl = ParentList(items=items, appendfunc=pre_add, removefunc=pre_remove)

        with self.assertRaises(ValueError):
            pl.append(33)
        self.assertEqual(33 in pl, False)

        pl.remove(4)
        pl.remove(3)
        with self.assertRaises(RuntimeError):
            pl.remove(2)
        self.assertEqual(list(pl), [0, 1, 2])

    def test_device_parents(self):
        """ Verify that Device.parents keeps the children lists in sync. """
        dev1 = Device("dev1", [])
        self.assertEqual(len(dev1.parents), 0)
        self.assertIsInstance(dev1.parents, ParentList)
        dev2 = Device("dev2")
        dev3 = Device("dev3", [dev1])
        self.assertEqual(len(dev3.parents), 1)
        self.assertEqual(dev1.children, [dev3])
        self.assertTrue(dev3.depends_on(dev1))
        self.assertFalse(dev3.depends_on(dev2))

        dev3.parents.remove(dev1)
        self.assertEqual(len(dev3.parents), 0)
        self.assertEqual(dev1.children, [])

        dev3.parents.append(dev1)
        dev3.parents.append(dev2)
        self.assertEqual(len(dev3.parents), 2)
        self.assertEqual(dev2.children, [dev3])

        dev3.parents = [dev1, dev2]
        self.assertEqual(len(dev3.parents), 2)

        dev3.parents = []
        self.assertEqual(len(dev3.parents), 0)
        self.assertTrue(dev1.isleaf)
        self.assertTrue(dev2.isleaf)

        with self.assertRaises(ValueError):
            Device("dev4", dev1)

    def test_ancestors_and_descendants(self):
        disk = Device("disk")
        part1 = Device("part1", [disk])
        part2 = Device("part2", [disk])
        vg = Device("vg", [part1, part2])
        lv = Device("lv", [vg])

        self.assertEqual(disk.descendants, [part1, vg, lv, part2])
        self.assertEqual(set(lv.ancestors), set([disk, part1, part2, vg, lv]))
        self.assertTrue(lv.depends_on(disk))

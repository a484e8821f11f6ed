from allotment.errors import DeviceNotFoundError, NoDiskSpaceError
from allotment.planned import PlannedLogicalVolume, PlannedVolumeGroup
from allotment.proposal import VolumeGroupBuilder
from allotment.size import Size, MiB, GiB

from .graphtestcase import GraphTestCase

# a PV of this size provides exactly 40 GiB to its volume group
PV_SIZE = Size("40 GiB") + MiB


def planned_lv(name=None, min_size="1 GiB", max_size=None, **kwargs):
    return PlannedLogicalVolume(logical_volume_name=name, min_size=Size(min_size),
                                max_size=max_size, **kwargs)


class VolumeGroupBuilderTestCase(GraphTestCase):

    def setUp(self):
        super(VolumeGroupBuilderTestCase, self).setUp()
        self.sda = self.add_disk("sda", Size("200 GiB"), label_type="gpt")
        self.sda1 = self.add_partition(self.sda, MiB, PV_SIZE)
        self.sda2 = self.add_partition(self.sda, PV_SIZE + MiB, PV_SIZE)

    def lv_sizes(self, vg):
        return dict((lv.lv_name, lv.size) for lv in vg.lvm_lvs)

    def test_new_volume_group(self):
        root = planned_lv("root", "10 GiB", Size("20 GiB"), mount_point="/",
                          filesystem_type="btrfs")
        swap = planned_lv("swap", "2 GiB", Size("2 GiB"), mount_point="swap",
                          filesystem_type="swap")
        planned_vg = PlannedVolumeGroup("system", lvs=[root, swap])

        before = self.snapshot()
        new_graph = VolumeGroupBuilder(self.devicegraph).create_volumes(planned_vg, ["sda1"])

        # the original devicegraph is untouched
        self.assertEqual(self.snapshot(), before)
        self.assertEqual(self.devicegraph.lvm_vgs, [])

        vg = new_graph.get_device_by_name("system")
        self.assertEqual(vg.path, "/dev/system")
        self.assertEqual([pv.name for pv in vg.pvs], ["sda1"])
        self.assertEqual(vg.size, Size("40 GiB"))
        self.assertEqual(self.lv_sizes(vg), {"root": Size("20 GiB"), "swap": Size("2 GiB")})

        lv = new_graph.get_device_by_name("system-root")
        self.assertEqual(lv.path, "/dev/system/root")
        self.assertEqual(lv.format.type, "btrfs")
        self.assertEqual(lv.format.mountpoint, "/")
        self.assertEqual(new_graph.get_device_by_name("system-swap").format.type, "swap")

        pv = new_graph.get_device_by_name("sda1")
        self.assertEqual(pv.format.type, "lvmpv")
        self.assertEqual(pv.format.vg_name, "system")

    def test_several_pvs(self):
        planned_vg = PlannedVolumeGroup("system", lvs=[planned_lv("root", "50 GiB")])
        new_graph = VolumeGroupBuilder(self.devicegraph).create_volumes(planned_vg,
                                                                        ["sda1", "sda2"])
        vg = new_graph.get_device_by_name("system")
        self.assertEqual(vg.size, Size("80 GiB"))
        # a single LV without maximum takes all the space
        self.assertEqual(self.lv_sizes(vg), {"root": Size("80 GiB")})
        self.assertEqual(vg.available_space, Size(0))

    def test_encrypted_pv(self):
        luks = self.sda1.encrypt("secret")
        planned_vg = PlannedVolumeGroup("system", lvs=[planned_lv("root", "10 GiB")])
        new_graph = VolumeGroupBuilder(self.devicegraph).create_volumes(planned_vg, ["sda1"])

        vg = new_graph.get_device_by_name("system")
        self.assertEqual([pv.name for pv in vg.pvs], [luks.name])
        self.assertEqual(vg.pvs[0].type, "luks/dm-crypt")
        # the LUKS header takes some space
        self.assertEqual(vg.size, Size("40 GiB") - Size("16 MiB"))

    def test_missing_pv(self):
        planned_vg = PlannedVolumeGroup("system", lvs=[planned_lv("root")])
        with self.assertRaises(DeviceNotFoundError):
            VolumeGroupBuilder(self.devicegraph).create_volumes(planned_vg, ["sdz1"])

    def test_vg_name_taken(self):
        self.add_vg("system", [self.sda2])
        planned_vg = PlannedVolumeGroup("system", lvs=[planned_lv("root")])
        new_graph = VolumeGroupBuilder(self.devicegraph).create_volumes(planned_vg, ["sda1"])

        self.assertEqual(sorted(vg.vg_name for vg in new_graph.lvm_vgs), ["system", "system0"])
        self.assertEqual(new_graph.get_device_by_name("system0").lvm_lvs[0].name, "system0-root")

    def test_lv_names(self):
        lvs = [planned_lv("root"), planned_lv("root"), planned_lv(), planned_lv()]
        planned_vg = PlannedVolumeGroup("system", lvs=lvs)
        new_graph = VolumeGroupBuilder(self.devicegraph).create_volumes(planned_vg, ["sda1"])

        vg = new_graph.get_device_by_name("system")
        self.assertEqual(sorted(lv.lv_name for lv in vg.lvm_lvs), ["lv", "lv0", "root", "root0"])

    def test_reused_vg_not_found(self):
        planned_vg = PlannedVolumeGroup("system", reuse="vg0", lvs=[planned_lv("root")])
        with self.assertRaises(DeviceNotFoundError):
            VolumeGroupBuilder(self.devicegraph).create_volumes(planned_vg)


class MakeSpaceTestCase(GraphTestCase):

    """ Reuse of a 40 GiB volume group with some logical volumes in it. """

    def setUp(self):
        super(MakeSpaceTestCase, self).setUp()
        sda = self.add_disk("sda", Size("100 GiB"), label_type="gpt")
        sda1 = self.add_partition(sda, MiB, PV_SIZE)
        self.vg = self.add_vg("vg0", [sda1])

    def create_volumes(self, planned_lvs, policy):
        planned_vg = PlannedVolumeGroup("vg0", reuse="vg0", lvs=planned_lvs,
                                        make_space_policy=policy)
        new_graph = VolumeGroupBuilder(self.devicegraph).create_volumes(planned_vg)
        return new_graph.get_device_by_name("vg0")

    def add_lvs(self, *sizes):
        for (name, size) in zip(("a", "b", "c", "d"), sizes):
            self.vg.create_lvm_lv(name, GiB * size)

    def test_keep(self):
        self.add_lvs(10, 20)
        vg = self.create_volumes([planned_lv("new", "5 GiB")], "keep")
        self.assertEqual(self.lv_names(vg), ["a", "b", "new"])
        self.assertEqual(vg.available_space, Size(0))

        with self.assertRaises(NoDiskSpaceError):
            self.create_volumes([planned_lv("new", "15 GiB")], "keep")

    def test_remove(self):
        self.add_lvs(10, 20, 5)
        planned_lvs = [planned_lv(reuse="b"), planned_lv("new", "5 GiB", Size("5 GiB"))]
        vg = self.create_volumes(planned_lvs, "remove")

        # the reused LV is kept, the planned one is created
        self.assertEqual(self.lv_names(vg), ["b", "new"])
        self.assertEqual(self.devicegraph.get_device_by_name("vg0").size, Size("40 GiB"))
        self.assertEqual(len(self.vg.lvm_lvs), 3)

    def test_needed_smallest_big_enough(self):
        self.add_lvs(10, 20, 5)
        vg = self.create_volumes([planned_lv("new", "15 GiB", Size("15 GiB"))], "needed")

        # 10 GiB were missing, a is the smallest LV that provides them
        self.assertEqual(self.lv_names(vg), ["b", "c", "new"])

    def test_needed_biggest_first(self):
        self.add_lvs(10, 12, 13)
        vg = self.create_volumes([planned_lv("new", "30 GiB", Size("30 GiB"))], "needed")

        # no LV provides the missing 25 GiB, c is the biggest one. After
        # deleting it, 12 GiB are missing and b is the one to delete.
        self.assertEqual(self.lv_names(vg), ["a", "new"])

    def test_needed_nothing_to_delete(self):
        self.add_lvs(10, 10)
        vg = self.create_volumes([planned_lv("new", "20 GiB")], "needed")
        self.assertEqual(self.lv_names(vg), ["a", "b", "new"])

    def test_needed_keeps_reused(self):
        self.add_lvs(10, 20, 5)
        planned_lvs = [planned_lv(reuse="a"), planned_lv("new", "15 GiB", Size("15 GiB"))]
        vg = self.create_volumes(planned_lvs, "needed")

        # a would be the best candidate, but it is reused
        self.assertEqual(self.lv_names(vg), ["a", "c", "new"])

    def test_needed_not_enough_space(self):
        self.add_lvs(10, 20, 5)
        before = self.snapshot()

        with self.assertRaises(NoDiskSpaceError):
            self.create_volumes([planned_lv("new", "45 GiB")], "needed")

        self.assertEqual(self.snapshot(), before)
        self.assertEqual(self.lv_names(self.vg), ["a", "b", "c"])

    def test_needed_reused_lvs_take_the_space(self):
        self.add_lvs(30, 5)
        planned_lvs = [planned_lv(reuse="a"), planned_lv("new", "12 GiB")]
        with self.assertRaises(NoDiskSpaceError):
            self.create_volumes(planned_lvs, "needed")

    def lv_names(self, vg):
        return sorted(lv.lv_name for lv in vg.lvm_lvs)

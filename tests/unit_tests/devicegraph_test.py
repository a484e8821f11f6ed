import unittest

from allotment.devicegraph import Devicegraph
from allotment.devices import DiskDevice, LUKSDevice, LVMVolumeGroupDevice, StorageDevice
from allotment.devices.lib import PartitionType, Region
from allotment.errors import (DeviceError, DeviceGraphError, DeviceNotFoundError, DiskLabelError,
                              PartitioningError)
from allotment.formats import get_format
from allotment.size import Size, KiB, MiB, GiB

from .graphtestcase import GraphTestCase

# blocks of 512 bytes in a MiB
MIB_BLOCKS = 2048


class DevicegraphTestCase(GraphTestCase):

    def test_add_device(self):
        dg = self.devicegraph
        disk = self.add_disk("sda", Size("10 GiB"), label_type=None)
        self.assertIs(disk.devicegraph, dg)
        self.assertEqual(dg.disks, [disk])
        self.assertEqual(dg.names, ["sda"])

        # duplicate names are not allowed
        with self.assertRaises(DeviceGraphError):
            dg.add_disk("sda", Size("20 GiB"))

        # and neither are orphans
        orphan = StorageDevice("orphan", parents=[DiskDevice("sdz", size=Size("1 GiB"))])
        with self.assertRaises(DeviceGraphError):
            dg._add_device(orphan)  # pylint: disable=protected-access

    def test_lookups(self):
        sda = self.windows_linux_disk("sda")
        sdb = self.add_disk("sdb", Size("10 GiB"))
        dg = self.devicegraph

        self.assertEqual(dg.disks, [sda, sdb])
        self.assertEqual([p.name for p in dg.partitions], ["sda1", "sda2", "sda3", "sda5", "sda6"])
        self.assertIs(dg.get_device_by_name("sda5"), sda.partitions[3])
        self.assertIsNone(dg.get_device_by_name("sdc"))
        self.assertIs(dg.get_device_by_id(sdb.id), sdb)

        self.assertEqual([p.name for p in dg.select(dg.partitions, part_type=PartitionType.logical)],
                         ["sda5", "sda6"])
        self.assertEqual(dg.select(dg.partitions, name="sda2"), [sda.partitions[1]])
        self.assertEqual(dg.select(name="sdb"), [sdb])
        self.assertEqual(dg.select(dg.partitions, no_such_attribute=1), [])

        self.assertIn("sda3", str(dg))

    def test_duplicate(self):
        sda = self.windows_linux_disk("sda")
        dg = self.devicegraph
        new = dg.duplicate()

        self.assertEqual(self.snapshot(new), self.snapshot())
        new_sda = new.get_device_by_name("sda")
        self.assertIsNot(new_sda, sda)
        self.assertEqual(new_sda.id, sda.id)
        self.assertIs(new_sda.devicegraph, new)
        self.assertIs(new_sda.partition_table.device, new_sda)

        # changes in the copy do not reach the original
        new_sda.partition_table.delete_partition("sda1")
        self.assertIsNone(new.get_device_by_name("sda1"))
        self.assertIsNotNone(dg.get_device_by_name("sda1"))
        self.assertEqual(len(sda.partitions), 5)

    def test_recursive_remove(self):
        sda = self.add_disk("sda", Size("100 GiB"), label_type="gpt")
        sda1 = self.add_partition(sda, MiB, Size("50 GiB"))
        luks = sda1.encrypt("secret")
        vg = self.add_vg("vg0", [luks], lvs=[("root", "10 GiB")])
        dg = self.devicegraph
        self.assertEqual(len(dg.devices), 5)
        self.assertEqual(dg.leaves, [vg.lvm_lvs[0]])

        dg.recursive_remove(sda1)
        self.assertEqual(dg.devices, [sda])

        # disks are not removed, they just lose their formatting
        dg.recursive_remove(sda)
        self.assertEqual(dg.devices, [sda])
        self.assertIsNone(sda.format.type)
        self.assertIsNone(sda.partition_table)

    def test_create_lvm_vg(self):
        sda = self.add_disk("sda", Size("100 GiB"), label_type="gpt")
        sda1 = self.add_partition(sda, MiB, Size("50 GiB") + MiB)
        vg = self.devicegraph.create_lvm_vg("vg0")
        self.assertIsInstance(vg, LVMVolumeGroupDevice)
        self.assertEqual(vg.size, Size(0))

        vg.add_lvm_pv(sda1)
        self.assertEqual(vg.size, Size("50 GiB"))
        self.assertEqual(vg.extent_size, Size("4 MiB"))
        self.assertEqual(vg.extents, 12800)
        self.assertEqual(self.devicegraph.lvm_vgs, [vg])

        with self.assertRaises(ValueError):
            self.devicegraph.create_lvm_vg("-bad")


class DiskLabelTestCase(GraphTestCase):

    def test_label_types(self):
        msdos = self.add_disk("sda", label_type="msdos").partition_table
        self.assertEqual(msdos.label_type, "msdos")
        self.assertEqual(msdos.max_primary, 4)
        self.assertTrue(msdos.extended_possible)

        gpt = self.add_disk("sdb", label_type="gpt").partition_table
        self.assertEqual(gpt.max_primary, 128)
        self.assertFalse(gpt.extended_possible)

        dasd = self.add_disk("dasda", label_type="dasd").partition_table
        self.assertEqual(dasd.max_primary, 3)
        self.assertFalse(dasd.extended_possible)

        with self.assertRaises(DiskLabelError):
            self.add_disk("sdc", label_type="sun")

    def test_usable_region(self):
        disk = self.add_disk("sda", Size("10 GiB"), label_type="msdos")
        region = disk.partition_table.usable_region
        self.assertEqual(region.start, MIB_BLOCKS)
        self.assertEqual(region.end, disk.total_blocks - 1)

        disk = self.add_disk("sdb", Size("10 GiB"), label_type="gpt")
        region = disk.partition_table.usable_region
        self.assertEqual(region.start, MIB_BLOCKS)
        self.assertEqual(region.end, disk.total_blocks - 1 - 33)

    def test_free_spaces_empty_disk(self):
        disk = self.add_disk("sda", Size("10 GiB"), label_type="msdos")
        spaces = disk.free_spaces
        self.assertEqual(len(spaces), 1)
        self.assertEqual(spaces[0].start_offset, MiB)
        self.assertEqual(spaces[0].disk_size, Size("10 GiB") - MiB)
        self.assertEqual(spaces[0].disk_name, "sda")
        self.assertFalse(spaces[0].inside_extended)

        # a disk without partition table is fully available
        disk = self.add_disk("sdb", Size("10 GiB"), label_type=None, preferred_label_type="gpt")
        spaces = disk.free_spaces
        self.assertEqual(len(spaces), 1)
        self.assertEqual(spaces[0].disk_size, Size("10 GiB") - MiB - 33 * Size(512))

        # unless it is used for something else
        disk = self.add_disk("sdc", Size("10 GiB"), label_type=None, fmt=get_format("lvmpv"))
        self.assertEqual(disk.free_spaces, [])

    def test_free_spaces(self):
        disk = self.windows_linux_disk("sda")
        spaces = disk.free_spaces
        self.assertEqual(len(spaces), 2)

        # inside the extended partition, after the last logical one and its
        # boot record
        self.assertTrue(spaces[0].inside_extended)
        self.assertEqual(spaces[0].start_offset, Size("352 GiB") + MiB)
        self.assertEqual(spaces[0].disk_size, Size("48 GiB") - MiB)

        # after the extended partition
        self.assertFalse(spaces[1].inside_extended)
        self.assertEqual(spaces[1].start_offset, Size("400 GiB"))
        self.assertEqual(spaces[1].disk_size, Size("100 GiB"))

        self.assertEqual(self.devicegraph.free_spaces(), spaces)

    def test_free_spaces_alignment(self):
        disk = self.add_disk("sda", Size("10 GiB"), label_type="gpt")
        self.add_partition(disk, MiB, Size("1 GiB") + 100 * KiB)
        self.add_partition(disk, Size("2 GiB"), Size("1 GiB"))

        spaces = disk.free_spaces
        # gaps start on a grain boundary
        self.assertEqual(spaces[0].start_offset, Size("1 GiB") + 2 * MiB)
        self.assertEqual(spaces[0].disk_size, Size("1 GiB") - 2 * MiB)
        self.assertEqual(spaces[1].start_offset, Size("3 GiB"))

        # gaps smaller than the grain are not free spaces
        disk = self.add_disk("sdb", Size("10 GiB"), label_type="gpt")
        self.add_partition(disk, MiB, Size("1 GiB") + 100 * KiB)
        self.add_partition(disk, Size("1 GiB") + 2 * MiB, Size("1 GiB"))
        self.assertEqual(disk.free_spaces[0].start_offset, Size("2 GiB") + 2 * MiB)

    def test_partition_numbers(self):
        disk = self.add_disk("sda", Size("100 GiB"), label_type="msdos")
        table = disk.partition_table
        sda1 = self.add_partition(disk, MiB, Size("10 GiB"))
        self.add_partition(disk, Size("10 GiB") + MiB, Size("50 GiB"), part_type="extended")
        sda5 = self.add_partition(disk, Size("10 GiB") + 2 * MiB, Size("10 GiB"),
                                  part_type="logical")
        sda6 = self.add_partition(disk, Size("20 GiB") + 3 * MiB, Size("10 GiB"),
                                  part_type="logical")
        sda3 = self.add_partition(disk, Size("70 GiB"), Size("10 GiB"))

        self.assertEqual([sda1.number, sda5.number, sda6.number, sda3.number], [1, 5, 6, 3])
        self.assertEqual(sda3.name, "sda3")
        self.assertEqual(table.logical_partitions, [sda5, sda6])
        self.assertEqual(table.primary_partitions, [sda1, sda3])
        self.assertEqual(table.extended_partition.name, "sda2")
        self.assertEqual(table.num_primary, 3)
        self.assertEqual(table.free_primary_slots, 1)

        # the numbers of the remaining logical partitions do not change
        table.delete_partition("sda5")
        self.assertEqual(sda6.name, "sda6")
        sda7 = self.add_partition(disk, Size("10 GiB") + 2 * MiB, Size("10 GiB"),
                                  part_type="logical")
        self.assertEqual(sda7.name, "sda7")

        # the first free number is used for primary partitions
        table.delete_partition("sda1")
        self.assertEqual(self.add_partition(disk, MiB, Size("1 GiB")).name, "sda1")

    def test_partition_name_separator(self):
        disk = self.add_disk("nvme0n1", Size("10 GiB"), label_type="gpt")
        partition = self.add_partition(disk, MiB, Size("1 GiB"))
        self.assertEqual(partition.name, "nvme0n1p1")
        self.assertEqual(partition.path, "/dev/nvme0n1p1")

    def test_extended_rules(self):
        gpt = self.add_disk("sda", Size("10 GiB"), label_type="gpt")
        with self.assertRaises(PartitioningError):
            self.add_partition(gpt, MiB, Size("1 GiB"), part_type="extended")

        msdos = self.add_disk("sdb", Size("10 GiB"), label_type="msdos")
        # no logical partitions without an extended one
        with self.assertRaises(PartitioningError):
            self.add_partition(msdos, MiB, Size("1 GiB"), part_type="logical")

        self.add_partition(msdos, MiB, Size("5 GiB"), part_type="extended")
        with self.assertRaises(PartitioningError):
            self.add_partition(msdos, Size("6 GiB"), Size("1 GiB"), part_type="extended")

        # logical partitions must be inside the extended one
        with self.assertRaises(PartitioningError):
            self.add_partition(msdos, Size("6 GiB"), Size("1 GiB"), part_type="logical")

    def test_primary_slots(self):
        disk = self.add_disk("dasda", Size("10 GiB"), label_type="dasd")
        for i in range(3):
            self.add_partition(disk, GiB * i + MiB, GiB)

        with self.assertRaises(PartitioningError):
            self.add_partition(disk, Size("5 GiB"), GiB)

    def test_bad_regions(self):
        disk = self.add_disk("sda", Size("10 GiB"), label_type="gpt")
        self.add_partition(disk, MiB, Size("2 GiB"))

        # overlapping
        with self.assertRaises(PartitioningError):
            self.add_partition(disk, GiB, Size("2 GiB"))

        # outside of the usable region
        with self.assertRaises(PartitioningError):
            self.add_partition(disk, Size("9 GiB"), Size("1 GiB"))
        with self.assertRaises(PartitioningError):
            self.add_partition(disk, Size(0), MiB)

        # empty
        with self.assertRaises(PartitioningError):
            self.add_partition(disk, Size("3 GiB"), Size(0))

    def test_delete_partition(self):
        disk = self.windows_linux_disk("sda")
        table = disk.partition_table
        with self.assertRaises(DeviceNotFoundError):
            table.delete_partition("sda4")

        # deleting the extended partition takes the logical ones too
        table.delete_partition("sda3")
        self.assertEqual([p.name for p in table.partitions], ["sda1", "sda2"])
        self.assertEqual(self.devicegraph.names, ["sda", "sda1", "sda2"])

    def test_create_partition_table(self):
        disk = self.windows_linux_disk("sda")
        with self.assertRaises(DeviceError):
            disk.create_partition_table("gpt")

        disk = self.add_disk("sdb", Size("10 GiB"), label_type=None, preferred_label_type="gpt")
        self.assertIsNone(disk.partition_table)
        table = disk.create_partition_table()
        self.assertIs(disk.partition_table, table)
        self.assertEqual(table.label_type, "gpt")

    def test_partition_outside_devicegraph(self):
        disk = DiskDevice("sda", size=Size("10 GiB"))
        disk.create_partition_table("gpt")
        with self.assertRaises(DeviceGraphError):
            disk.partition_table.create_partition("primary", Region(MIB_BLOCKS, MIB_BLOCKS))


class DevicesTestCase(GraphTestCase):

    def test_partition(self):
        disk = self.add_disk("sda", Size("10 GiB"), label_type="gpt")
        partition = self.add_partition(disk, MiB, Size("1 GiB"))
        self.assertEqual(partition.size, Size("1 GiB"))
        self.assertIs(partition.disk, disk)
        self.assertIs(partition.partition_table, disk.partition_table)
        self.assertTrue(partition.is_primary)
        self.assertEqual(partition.type, "partition")
        self.assertEqual(partition.disks, [disk])

        with self.assertRaises(DeviceError):
            partition.size = Size("2 GiB")

    def test_encryption(self):
        disk = self.add_disk("sda", Size("10 GiB"), label_type="msdos")
        partition = self.add_partition(disk, MiB, Size("1 GiB"))
        self.assertFalse(partition.encrypted)

        luks = partition.encrypt("secret")
        self.assertIsInstance(luks, LUKSDevice)
        self.assertIs(partition.encryption, luks)
        self.assertTrue(partition.encrypted)
        self.assertEqual(partition.format.type, "luks")
        self.assertTrue(partition.format.has_key)
        self.assertEqual(luks.name, "luks-sda1")
        self.assertEqual(luks.path, "/dev/mapper/luks-sda1")
        self.assertEqual(luks.size, Size("1 GiB") - Size("16 MiB"))

        with self.assertRaises(DeviceError):
            partition.encrypt("again")

        extended = self.add_partition(disk, Size("2 GiB"), Size("1 GiB"), part_type="extended")
        with self.assertRaises(DeviceError):
            extended.encrypt("secret")

    def test_lvm(self):
        disk = self.add_disk("sda", Size("100 GiB"), label_type="gpt")
        sda1 = self.add_partition(disk, MiB, Size("10 GiB") + MiB)
        sda2 = self.add_partition(disk, Size("11 GiB"), Size("10 GiB") + MiB)
        vg = self.add_vg("vg0", [sda1])

        self.assertEqual(vg.size, Size("10 GiB"))
        lv = vg.create_lvm_lv("root", Size("2 GiB") + MiB)
        # sizes are rounded down to whole extents
        self.assertEqual(lv.size, Size("2 GiB"))
        self.assertEqual(vg.available_space, Size("8 GiB"))
        self.assertEqual(lv.vg, vg)
        self.assertEqual(lv.name, "vg0-root")
        self.assertEqual(lv.lv_name, "root")
        self.assertEqual(vg.align(Size("5 MiB"), roundup=True), Size("8 MiB"))

        with self.assertRaises(DeviceError):
            vg.create_lvm_lv("root", GiB)
        with self.assertRaises(DeviceError):
            vg.create_lvm_lv("big", Size("9 GiB"))

        vg.add_lvm_pv(sda2)
        self.assertEqual(vg.size, Size("20 GiB"))
        vg.create_lvm_lv("big", Size("9 GiB"))

        with self.assertRaises(DeviceError):
            vg.add_lvm_pv(sda2)
        other = self.devicegraph.create_lvm_vg("vg1")
        with self.assertRaises(DeviceError):
            other.add_lvm_pv(sda1)

        vg.delete_lvm_lv(lv)
        self.assertEqual([l.lv_name for l in vg.lvm_lvs], ["big"])


class RegionTestCase(unittest.TestCase):

    def test_region(self):
        region = Region(2048, 2048)
        self.assertEqual(region.end, 4095)
        self.assertEqual(region.size, MiB)
        self.assertEqual(region.start_offset, MiB)

        self.assertTrue(Region(0, 8192).contains(region))
        self.assertFalse(region.contains(Region(0, 8192)))
        self.assertTrue(region.overlaps(Region(4095, 10)))
        self.assertFalse(region.overlaps(Region(4096, 10)))
        self.assertEqual(region, Region(2048, 2048, 512))
        self.assertNotEqual(region, Region(2048, 2048, 4096))

        with self.assertRaises(ValueError):
            Region(-1, 10)


class DevicegraphWithoutHelpersTestCase(unittest.TestCase):

    def test_empty(self):
        dg = Devicegraph()
        self.assertEqual(dg.devices, [])
        self.assertEqual(dg.free_spaces(), [])
        self.assertEqual(dg.duplicate().devices, [])

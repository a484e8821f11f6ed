from allotment.devicegraph import Devicegraph
from allotment.devices.lib import PartitionType
from allotment.errors import DeviceNotFoundError
from allotment.planned import PlannedPartition
from allotment.proposal import DistributionCalculator, PartitionCreator, PartitionsDistribution
from allotment.size import Size, MiB, GiB

from .graphtestcase import GraphTestCase


def planned(min_size, max_size=None, **kwargs):
    return PlannedPartition(min_size=Size(min_size), max_size=max_size, **kwargs)


class PartitionCreatorTestCase(GraphTestCase):

    def create(self, assignment):
        distribution = PartitionsDistribution(assignment)
        return PartitionCreator(self.devicegraph).create_partitions(distribution)

    def test_primary_partitions(self):
        disk = self.add_disk("sda", Size("100 GiB"), label_type="gpt")
        root = planned("10 GiB", Size("20 GiB"), mount_point="/", filesystem_type="ext4")
        swap = planned("2 GiB", Size("2 GiB"), mount_point="swap", filesystem_type="swap")

        before = self.snapshot()
        result = self.create({disk.free_spaces[0]: [root, swap]})

        self.assertEqual(self.snapshot(), before)
        self.assertEqual(disk.partitions, [])

        self.assertEqual(list(result.devices_map.keys()), ["sda1", "sda2"])
        self.assertIs(result.devices_map["sda1"], root)
        self.assertIs(result.devices_map["sda2"], swap)

        sda1 = result.devicegraph.get_device_by_name("sda1")
        sda2 = result.devicegraph.get_device_by_name("sda2")
        self.assertEqual(sda1.part_type, PartitionType.primary)
        self.assertEqual(sda1.region.start_offset, MiB)
        self.assertEqual(sda1.size, Size("20 GiB"))
        self.assertEqual(sda1.format.type, "ext4")
        self.assertEqual(sda1.format.mountpoint, "/")
        self.assertEqual(sda2.region.start_offset, Size("20 GiB") + MiB)
        self.assertEqual(sda2.size, Size("2 GiB"))
        self.assertEqual(sda2.format.type, "swap")

    def test_new_extended_partition(self):
        self.add_disk("sda", Size("100 GiB"), label_type="msdos")
        partitions = [planned("1 GiB", Size("1 GiB")) for _ in range(5)]
        distribution = DistributionCalculator().best_distribution(partitions,
                                                                  self.devicegraph.free_spaces())
        result = PartitionCreator(self.devicegraph).create_partitions(distribution)
        new_graph = result.devicegraph

        table = new_graph.get_device_by_name("sda").partition_table
        extended = table.extended_partition
        self.assertEqual(extended.name, "sda1")
        self.assertEqual(extended.region.start_offset, MiB)
        self.assertEqual(extended.size, Size("100 GiB") - MiB)

        self.assertEqual(list(result.devices_map.keys()), ["sda5", "sda6", "sda7", "sda8", "sda9"])
        logical = table.logical_partitions
        self.assertEqual(len(logical), 5)
        # every logical partition is preceded by its boot record
        self.assertEqual(logical[0].region.start_offset, 2 * MiB)
        self.assertEqual(logical[1].region.start_offset, GiB + 3 * MiB)
        self.assertEqual(logical[4].region.start_offset, 4 * GiB + 6 * MiB)
        for partition in logical:
            self.assertEqual(partition.size, GiB)

    def test_existing_extended_partition(self):
        disk = self.windows_linux_disk("sda")
        inside = next(s for s in disk.free_spaces if s.inside_extended)
        result = self.create({inside: [planned("1 GiB", Size("1 GiB")),
                                       planned("1 GiB", Size("1 GiB"))]})
        new_graph = result.devicegraph

        sda7 = new_graph.get_device_by_name("sda7")
        sda8 = new_graph.get_device_by_name("sda8")
        self.assertTrue(sda7.is_logical)
        self.assertEqual(sda7.region.start_offset, Size("352 GiB") + MiB)
        self.assertEqual(sda8.region.start_offset, Size("353 GiB") + 2 * MiB)

        # no new extended partition
        self.assertEqual(new_graph.get_device_by_name("sda3").size, Size("100 GiB"))
        self.assertEqual(len(new_graph.partitions), 7)

        spaces = new_graph.get_device_by_name("sda").free_spaces
        self.assertEqual(spaces[0].start_offset, Size("354 GiB") + 3 * MiB)

    def test_enforced_last(self):
        disk = self.add_disk("sda", Size("10 GiB"), label_type="gpt")
        space = disk.free_spaces[0]
        # the space does not end on a grain boundary
        self.assertEqual(space.disk_size, Size("10 GiB") - MiB - 33 * Size(512))

        small = planned("4 GiB", Size("4 GiB"))
        rest = planned(space.disk_size - Size("4 GiB"))
        self.assertEqual(rest.min_size, Size("6 GiB") - MiB - 33 * Size(512))
        result = self.create({space: [rest, small]})

        sda1 = result.devicegraph.get_device_by_name("sda1")
        sda2 = result.devicegraph.get_device_by_name("sda2")
        self.assertIs(result.devices_map["sda2"], rest)
        self.assertEqual(sda1.size, Size("4 GiB"))
        self.assertEqual(sda2.size, rest.min_size)
        self.assertEqual(sda2.region.end, disk.partition_table.usable_region.end)

    def test_last_takes_the_remainder(self):
        disk = self.add_disk("sda", Size("10 GiB"), label_type="gpt")
        space = disk.free_spaces[0]
        result = self.create({space: [planned("1 GiB", Size("2 GiB")), planned("1 GiB")]})

        sda2 = result.devicegraph.get_device_by_name("sda2")
        self.assertEqual(sda2.size, space.disk_size - Size("2 GiB"))
        self.assertEqual(sda2.size % MiB, MiB - 33 * Size(512))

    def test_encryption(self):
        disk = self.add_disk("sda", Size("100 GiB"), label_type="gpt")
        root = planned("10 GiB", Size("10 GiB"), mount_point="/", filesystem_type="ext4",
                       encryption_password="secret")
        pv = planned("20 GiB", Size("20 GiB"), partition_id="lvm", encryption_password="secret",
                     lvm_volume_group_name="system")
        new_graph = self.create({disk.free_spaces[0]: [root, pv]}).devicegraph

        sda1 = new_graph.get_device_by_name("sda1")
        self.assertTrue(sda1.encrypted)
        self.assertEqual(sda1.format.type, "luks")
        luks = new_graph.get_device_by_name("luks-sda1")
        self.assertEqual(luks.format.type, "ext4")
        self.assertEqual(luks.format.mountpoint, "/")

        # PVs are left for the volume group builder
        sda2 = new_graph.get_device_by_name("sda2")
        self.assertEqual(sda2.partition_id, "lvm")
        self.assertIsNone(new_graph.get_device_by_name("luks-sda2").format.type)

    def test_new_partition_table(self):
        disk = self.add_disk("sda", Size("100 GiB"), label_type=None, preferred_label_type="gpt")
        result = self.create({disk.free_spaces[0]: [planned("10 GiB")]})

        self.assertIsNone(disk.partition_table)
        new_disk = result.devicegraph.get_device_by_name("sda")
        self.assertEqual(new_disk.partition_table.label_type, "gpt")
        self.assertEqual(self.names(new_disk.partitions), ["sda1"])
        # a partition without maximum takes the whole space
        self.assertEqual(new_disk.partitions[0].size, Size("100 GiB") - MiB - 33 * Size(512))

    def test_missing_disk(self):
        other = Devicegraph()
        disk = other.add_disk("sdz", Size("100 GiB"), label_type="gpt")
        distribution = PartitionsDistribution({disk.free_spaces[0]: [planned("1 GiB")]})

        with self.assertRaises(DeviceNotFoundError):
            PartitionCreator(self.devicegraph).create_partitions(distribution)

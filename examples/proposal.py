import allotment
from allotment.devicegraph import Devicegraph
from allotment.devices import Region
from allotment.formats import get_format
from allotment.size import Size
from allotment.util import set_up_logging

from common import print_devices

set_up_logging()

# a disk shared with another operating system, with some free space at the end
devicegraph = Devicegraph()
disk = devicegraph.add_disk("sda", Size("250 GiB"), label_type="msdos")
region = Region(2048, int(Size("200 GiB") // disk.sector_size), disk.sector_size)
windows = disk.partition_table.create_partition("primary", region)
windows.format = get_format("ntfs")

settings = allotment.ProposalSettings()
settings.delete_mode = "ondemand"

outcome = allotment.DistributionOrchestrator(devicegraph, settings).propose()
if not outcome.success:
    print("no proposal: %s" % outcome.error)
else:
    print(outcome.devicegraph)
    print_devices(outcome.devicegraph)
    print("deleted partitions: %s" % outcome.deleted_partitions)
    print("separate home: %s, snapshots: %s" % (outcome.settings.use_separate_home,
                                                outcome.settings.use_snapshots))

import allotment
from allotment.devicegraph import Devicegraph
from allotment.size import Size
from allotment.util import set_up_logging

from common import print_devices

set_up_logging(console_logs=["allotment"])

# two empty disks, only the second one is used
devicegraph = Devicegraph()
devicegraph.add_disk("sda", Size("100 GiB"), label_type="gpt")
devicegraph.add_disk("sdb", Size("500 GiB"), preferred_label_type="gpt")

settings = allotment.ProposalSettings()
settings.use_lvm = True
settings.lvm_vg_name = "system"
settings.encryption_password = "123456"
settings.candidate_disks = ["sdb"]

outcome = allotment.DistributionOrchestrator(devicegraph, settings).propose()
if outcome.success:
    print(outcome.devicegraph)
    print_devices(outcome.devicegraph)

    vg = outcome.devicegraph.get_device_by_name("system")
    for lv in vg.lvm_lvs:
        print("%s: %s (%s)" % (lv.path, lv.size, lv.format))
    print("free space in %s: %s" % (vg.name, vg.available_space))
else:
    print("no proposal: %s" % outcome.error)

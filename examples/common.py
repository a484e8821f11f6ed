def print_devices(devicegraph):
    print()
    for device in sorted(devicegraph.devices, key=lambda d: len(d.ancestors)):
        print(device)
        if device.format.type:
            print("\t%s" % device.format)
        if device.format.mountpoint:
            print("\t%s" % device.format.mountpoint)

    print()

SERVICE_NAME = "netkit"

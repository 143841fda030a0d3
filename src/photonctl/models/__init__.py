from photonctl.models.clusters import (
    Cluster,
    ClusterCreateSpec,
    ClusterResizeSpec,
    ClusterState,
    ExtendedProperty,
)
from photonctl.models.common import ApiError, EntityRef, PhotonModel, QuotaLineItem, Resource
from photonctl.models.disks import DiskCreateSpec, PersistentDisk
from photonctl.models.flavors import FLAVOR_KINDS, Flavor, FlavorCreateSpec
from photonctl.models.hosts import Host, HostCreateSpec
from photonctl.models.images import Image
from photonctl.models.networks import (
    Network,
    NetworkCreateSpec,
    Router,
    RouterCreateSpec,
    Subnet,
    SubnetCreateSpec,
)
from photonctl.models.tasks import TERMINAL_TASK_STATES, Step, Task, TaskState
from photonctl.models.tenants import Project, ProjectCreateSpec, SecurityGroup, Tenant, TenantCreateSpec
from photonctl.models.vms import VM, AttachedDisk, VMCreateSpec, VMDiskOperation, VMNetwork

__all__ = [
    "FLAVOR_KINDS",
    "TERMINAL_TASK_STATES",
    "VM",
    "ApiError",
    "AttachedDisk",
    "Cluster",
    "ClusterCreateSpec",
    "ClusterResizeSpec",
    "ClusterState",
    "DiskCreateSpec",
    "EntityRef",
    "ExtendedProperty",
    "Flavor",
    "FlavorCreateSpec",
    "Host",
    "HostCreateSpec",
    "Image",
    "Network",
    "NetworkCreateSpec",
    "PersistentDisk",
    "PhotonModel",
    "Project",
    "ProjectCreateSpec",
    "QuotaLineItem",
    "Resource",
    "Router",
    "RouterCreateSpec",
    "SecurityGroup",
    "Step",
    "Subnet",
    "SubnetCreateSpec",
    "Task",
    "TaskState",
    "Tenant",
    "TenantCreateSpec",
    "VMCreateSpec",
    "VMDiskOperation",
    "VMNetwork",
]

from photonctl.services.clusters import ClustersService, ServicesService
from photonctl.services.disks import DisksService
from photonctl.services.flavors import FlavorsService
from photonctl.services.hosts import HostsService
from photonctl.services.images import ImagesService
from photonctl.services.networks import NetworksService, RoutersService, SubnetsService
from photonctl.services.tasks import TasksService
from photonctl.services.tenants import ProjectsService, TenantsService
from photonctl.services.vms import VMsService

__all__ = [
    "ClustersService",
    "DisksService",
    "FlavorsService",
    "HostsService",
    "ImagesService",
    "NetworksService",
    "ProjectsService",
    "RoutersService",
    "ServicesService",
    "SubnetsService",
    "TasksService",
    "TenantsService",
    "VMsService",
]

from .step_10_system_update import SystemUpdateStep
from .step_15_network_info import NetworkInfoStep
from .step_20_storage import StorageStep
from .step_30_gpu_driver import GpuDriverStep
from .step_40_container_runtime import ContainerRuntimeStep
from .step_50_gpu_toolkit import GpuToolkitStep
from .step_60_app_platform import AppPlatformStep
from .step_70_optional_tools import OptionalToolsStep
from .step_90_summary_reboot import SummaryRebootStep

__all__ = [
    "SystemUpdateStep",
    "NetworkInfoStep",
    "StorageStep",
    "GpuDriverStep",
    "ContainerRuntimeStep",
    "GpuToolkitStep",
    "AppPlatformStep",
    "OptionalToolsStep",
    "SummaryRebootStep",
]

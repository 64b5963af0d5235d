from .initializer_node import InitializerNode
from .parcel_node import ParcelNode
from .places_node import PlacesNode
from .validation_node import ValidationNode
from .mapping_node import MappingNode
from .registry_node import RegistryNode
from .ownership_node import OwnershipNode
from .finalize_node import FinalizeNode

__all__ = [
    "InitializerNode",
    "ParcelNode",
    "PlacesNode",
    "ValidationNode",
    "MappingNode",
    "RegistryNode",
    "OwnershipNode",
    "FinalizeNode",
]

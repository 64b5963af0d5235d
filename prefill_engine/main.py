import logging
from typing import Any, Dict, Optional

from langgraph.graph import START, StateGraph, END

from .config import LOG_FORMAT, LOG_LEVEL, Settings
from .state import ReconciliationState
from .nodes import (
    InitializerNode,
    ParcelNode,
    PlacesNode,
    ValidationNode,
    MappingNode,
    RegistryNode,
    OwnershipNode,
    FinalizeNode,
)

# Set up logging
logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
logger = logging.getLogger(__name__)

ADDRESS_REQUIRED_MESSAGE = "Address is required"


class PropertyReconciliationGraph:
    def __init__(self, settings: Optional[Settings] = None, address=None):
        """Initialize the property reconciliation graph.

        Args:
            settings: Provider credentials; read from the environment when omitted
            address: Optional initial address to reconcile
        """
        self.settings = settings or Settings.from_env()
        self.address = address
        self._init_nodes()
        self._build_workflow()
        self.compiled_app = None

    def _init_nodes(self):
        """Initialize all workflow nodes"""
        self.initializer = InitializerNode()
        self.parcel_node = ParcelNode(self.settings)
        self.places_node = PlacesNode(self.settings)
        self.validation_node = ValidationNode()
        self.mapping_node = MappingNode(self.settings)
        self.registry_node = RegistryNode(self.settings)
        self.ownership_node = OwnershipNode()
        self.finalizer = FinalizeNode()

    def _build_workflow(self):
        """Configure the state graph workflow"""
        self.workflow = StateGraph(ReconciliationState)

        # Add nodes
        self.workflow.add_node("initialize", self.initializer.run)
        self.workflow.add_node("parcel_search", self.parcel_node.run)
        self.workflow.add_node("places_search", self.places_node.run)
        self.workflow.add_node("validate_property", self.validation_node.run)
        self.workflow.add_node("map_fields", self.mapping_node.run)
        self.workflow.add_node("registry_search", self.registry_node.run)
        self.workflow.add_node("resolve_ownership", self.ownership_node.run)
        self.workflow.add_node("finalize", self.finalizer.run)

        # Phase 1: Fetch parcel and places data in parallel
        self.workflow.add_edge(START, "initialize")
        self.workflow.add_edge("initialize", "parcel_search")
        self.workflow.add_edge("initialize", "places_search")

        # Wait for both fetches before validating
        self.workflow.add_edge(["parcel_search", "places_search"], "validate_property")

        # Phase 2: Without a parcel record there is nothing to map
        self.workflow.add_conditional_edges(
            "validate_property",
            lambda state: self._has_property_data(state),
            {True: "map_fields", False: "finalize"},
        )

        # Phase 3: Form mapping, registry enrichment and ownership
        self.workflow.add_edge("map_fields", "registry_search")
        self.workflow.add_edge("registry_search", "resolve_ownership")
        self.workflow.add_edge("resolve_ownership", "finalize")
        self.workflow.add_edge("finalize", END)

    def _has_property_data(self, state: ReconciliationState) -> bool:
        """Check if the parcel provider returned a principal record."""
        property_data = state.get("property_data")
        return bool(property_data and property_data.get("principal"))

    def compile(self):
        """Compile the workflow and cache the compiled app.

        Returns:
            The compiled workflow app
        """
        if self.compiled_app is None:
            logger.info("Compiling property reconciliation workflow")
            self.compiled_app = self.workflow.compile()
        return self.compiled_app

    def create_initial_state(self, address):
        """Create an initial state for the workflow.

        Args:
            address: The business address to reconcile

        Returns:
            ReconciliationState: The initial state for the workflow
        """
        if not address:
            raise ValueError("Address is required to create the initial state")

        return ReconciliationState(
            address=address,
            property_data=None,
            places_data=None,
            validation=None,
            mapped_data=None,
            registry_match=None,
            ownership=None,
            result=None,
            current_step="starting workflow",
            next_steps=["initialize"],
            errors=[],
        )

    def run(self, address=None) -> Dict[str, Any]:
        """Reconcile the given address or the default address.

        The graph instance is not modified, so one compiled graph can serve concurrent
        requests.

        Args:
            address: Address to reconcile; falls back to the address set on the graph

        Returns:
            dict: The reconciliation result (success, data, validation, ownership,
                  registry, message, fieldsCount, errors)

        Raises:
            ParcelProviderError: When the parcel provider is unreachable or rejects the request
        """
        if address is None:
            address = self.address

        if not isinstance(address, str) or not address.strip():
            return {"success": False, "message": ADDRESS_REQUIRED_MESSAGE}

        # Ensure the workflow is compiled
        app = self.compile()

        # Create initial state
        state = self.create_initial_state(address)

        # Run the graph
        logger.info(f"Starting property reconciliation workflow for {state['address']}")
        final_state = app.invoke(state)
        logger.info("Property reconciliation workflow completed")

        return final_state["result"]

    def visualize(self, output_path="workflow_diagram.mmd"):
        """Save a diagram of the workflow.

        A ``.png`` path is rendered through the Mermaid web service; any other path
        receives the Mermaid source.

        Args:
            output_path: Path to save the diagram

        Returns:
            bool: True if successful, False otherwise
        """
        try:
            graph = self.compile().get_graph()
            if output_path.endswith(".png"):
                with open(output_path, "wb") as f:
                    f.write(graph.draw_mermaid_png())
            else:
                with open(output_path, "w") as f:
                    f.write(graph.draw_mermaid())
            logger.info(f"Workflow diagram saved as {output_path}")
            return True
        except Exception as e:
            logger.warning(f"Could not save workflow diagram: {e}")
            return False


def reconcile(address: str, settings: Optional[Settings] = None) -> Dict[str, Any]:
    """Reconcile a single address with a freshly built graph."""
    return PropertyReconciliationGraph(settings=settings).run(address)

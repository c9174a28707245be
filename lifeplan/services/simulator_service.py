"""
Simulator service owning the application state and its commands.

The whole plan lives in one ``SimulatorState``. Callers never mutate it:
they hand the service a state and a command and receive a new state whose
projection has been recomputed from scratch whenever an input changed.
"""

import logging
from typing import Annotated, Any, Callable, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from lifeplan.errors import HorizonTooLongError, UnknownCommandError
from lifeplan.models.derived_items import populate_derived_items
from lifeplan.models.history import HistoryEntry, HistoryLog
from lifeplan.models.household import Household, Parameters
from lifeplan.models.life_events import LifeEvent
from lifeplan.models.line_items import Book, ItemKind, ItemRole, LineItemStore
from lifeplan.models.projection import CashFlowData, run_projection
from lifeplan.models.units import round_man_yen

logger = logging.getLogger(__name__)


class SimulatorState(BaseModel):
    """Complete application state of one plan."""

    household: Household = Field(default_factory=Household)
    parameters: Parameters = Field(default_factory=Parameters)
    store: LineItemStore = Field(default_factory=LineItemStore)
    life_events: List[LifeEvent] = Field(default_factory=list)
    cash_flow: CashFlowData = Field(default_factory=CashFlowData)
    history: HistoryLog = Field(default_factory=HistoryLog)


class SetHousehold(BaseModel):
    """Merge changes into the household profile."""

    kind: Literal["set_household"] = "set_household"
    changes: Dict[str, Any] = Field(default_factory=dict)


class SetParameters(BaseModel):
    """Merge changes into the macro parameters."""

    kind: Literal["set_parameters"] = "set_parameters"
    changes: Dict[str, Any] = Field(default_factory=dict)


class AddItem(BaseModel):
    kind: Literal["add_item"] = "add_item"
    item_kind: ItemKind
    book: Book
    name: str = "その他"
    type: str = "other"
    category: Optional[str] = None
    role: Optional[ItemRole] = None


class RemoveItem(BaseModel):
    kind: Literal["remove_item"] = "remove_item"
    item_kind: ItemKind
    book: Book
    item_id: str


class RenameItem(BaseModel):
    kind: Literal["rename_item"] = "rename_item"
    item_kind: ItemKind
    book: Book
    item_id: str
    name: str


class RecategorizeItem(BaseModel):
    kind: Literal["recategorize_item"] = "recategorize_item"
    item_kind: ItemKind
    book: Book
    item_id: str
    category: Optional[str] = None


class SetAmount(BaseModel):
    """Set one year's amount of one item; recorded in the history."""

    kind: Literal["set_amount"] = "set_amount"
    item_kind: ItemKind
    book: Book
    item_id: str
    year: int
    value: float


class AddLifeEvent(BaseModel):
    kind: Literal["add_life_event"] = "add_life_event"
    event: LifeEvent


class ClearHistory(BaseModel):
    kind: Literal["clear_history"] = "clear_history"


Command = Annotated[
    Union[
        SetHousehold,
        SetParameters,
        AddItem,
        RemoveItem,
        RenameItem,
        RecategorizeItem,
        SetAmount,
        AddLifeEvent,
        ClearHistory,
    ],
    Field(discriminator="kind"),
]


class CommandEnvelope(BaseModel):
    """Wrapper used to parse a command from JSON."""

    command: Command


class SimulatorService:
    """Service applying commands to simulator state."""

    def __init__(self, max_horizon_years: int = 121) -> None:
        """Initialize the simulator service.

        Args:
            max_horizon_years: Longest horizon a household may request
        """
        self.max_horizon_years = max_horizon_years
        self.logger = logging.getLogger(__name__)
        self._handlers: Dict[str, Callable[[SimulatorState, Any], SimulatorState]] = {
            "set_household": self._set_household,
            "set_parameters": self._set_parameters,
            "add_item": self._add_item,
            "remove_item": self._remove_item,
            "rename_item": self._rename_item,
            "recategorize_item": self._recategorize_item,
            "set_amount": self._set_amount,
            "add_life_event": self._add_life_event,
            "clear_history": self._clear_history,
        }

    def initial_state(
        self,
        household: Optional[Household] = None,
        parameters: Optional[Parameters] = None,
        store: Optional[LineItemStore] = None,
    ) -> SimulatorState:
        """Build a state with generated line items and a fresh projection.

        Args:
            household: Household profile (defaults apply when omitted)
            parameters: Macro parameters (defaults apply when omitted)
            store: Line items to start from (the default items when omitted)

        Returns:
            Fully projected SimulatorState
        """
        household = household or Household()
        parameters = parameters or Parameters()
        store = populate_derived_items(household, parameters, store or LineItemStore())
        state = SimulatorState(household=household, parameters=parameters, store=store)
        return self.recompute(state)

    def recompute(self, state: SimulatorState) -> SimulatorState:
        """Discard the projection and regenerate it from the current inputs.

        Raises:
            HorizonTooLongError: If the horizon exceeds the configured maximum
        """
        horizon = state.household.horizon_years
        if horizon > self.max_horizon_years:
            raise HorizonTooLongError(
                f"Horizon of {horizon} years exceeds the maximum of "
                f"{self.max_horizon_years}"
            )
        cash_flow = run_projection(state.household, state.parameters, state.store)
        return state.model_copy(update={"cash_flow": cash_flow})

    def apply(self, state: SimulatorState, command: BaseModel) -> SimulatorState:
        """Apply a command and return the resulting state.

        Args:
            state: Current state (left unchanged)
            command: One of the command models

        Returns:
            New state, re-projected when the command touched any input

        Raises:
            UnknownCommandError: If the command kind has no handler
            LineItemNotFoundError: If the command names a missing item
            ValueError: If merged household or parameter values are invalid
        """
        kind = getattr(command, "kind", None)
        handler = self._handlers.get(kind) if isinstance(kind, str) else None
        if handler is None:
            raise UnknownCommandError(f"Unsupported command: {kind}")

        self.logger.debug(f"Applying command {kind}")
        new_state = handler(state, command)
        if kind == "clear_history":
            return new_state
        return self.recompute(new_state)

    # Command handlers

    def _set_household(
        self, state: SimulatorState, command: SetHousehold
    ) -> SimulatorState:
        household = Household.model_validate(
            {**state.household.model_dump(), **command.changes}
        )
        self.logger.info(f"Household updated: {sorted(command.changes)}")
        store = populate_derived_items(household, state.parameters, state.store)
        return state.model_copy(update={"household": household, "store": store})

    def _set_parameters(
        self, state: SimulatorState, command: SetParameters
    ) -> SimulatorState:
        parameters = Parameters.model_validate(
            {**state.parameters.model_dump(), **command.changes}
        )
        self.logger.info(f"Parameters updated: {sorted(command.changes)}")
        store = populate_derived_items(state.household, parameters, state.store)
        return state.model_copy(update={"parameters": parameters, "store": store})

    def _add_item(self, state: SimulatorState, command: AddItem) -> SimulatorState:
        store = state.store.add_item(
            command.item_kind,
            command.book,
            name=command.name,
            type=command.type,
            category=command.category,
            role=command.role,
        )
        return state.model_copy(update={"store": store})

    def _remove_item(
        self, state: SimulatorState, command: RemoveItem
    ) -> SimulatorState:
        store = state.store.remove_item(
            command.item_kind, command.book, command.item_id
        )
        return state.model_copy(update={"store": store})

    def _rename_item(
        self, state: SimulatorState, command: RenameItem
    ) -> SimulatorState:
        store = state.store.rename_item(
            command.item_kind, command.book, command.item_id, command.name
        )
        return state.model_copy(update={"store": store})

    def _recategorize_item(
        self, state: SimulatorState, command: RecategorizeItem
    ) -> SimulatorState:
        store = state.store.recategorize_item(
            command.item_kind, command.book, command.item_id, command.category
        )
        return state.model_copy(update={"store": store})

    def _set_amount(self, state: SimulatorState, command: SetAmount) -> SimulatorState:
        item = state.store.get_item(command.item_kind, command.book, command.item_id)
        value = round_man_yen(command.value)
        entry = HistoryEntry(
            type=command.item_kind,
            section=command.book,
            item_id=command.item_id,
            year=command.year,
            previous_value=item.amount(command.year),
            new_value=value,
        )
        store = state.store.set_amount(
            command.item_kind, command.book, command.item_id, command.year, value
        )
        return state.model_copy(
            update={"store": store, "history": state.history.append(entry)}
        )

    def _add_life_event(
        self, state: SimulatorState, command: AddLifeEvent
    ) -> SimulatorState:
        return state.model_copy(
            update={"life_events": [*state.life_events, command.event]}
        )

    def _clear_history(
        self, state: SimulatorState, command: ClearHistory
    ) -> SimulatorState:
        return state.model_copy(update={"history": state.history.clear()})


def parse_command(payload: Dict[str, Any]) -> BaseModel:
    """Validate a JSON command payload into its command model."""
    return CommandEnvelope.model_validate({"command": payload}).command

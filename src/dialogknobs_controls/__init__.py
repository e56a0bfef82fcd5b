"""Reusable dialog controls for multi-turn conversational interfaces.

This package provides a multi-value list control that elicits, validates,
confirms and paginates a list-backed slot across several turns:

- **Control**: ``MultiValueListControl`` and the ``Control`` base protocol
- **Input/Output**: ``ControlInput``/``ParsedIntent`` in, semantic acts and
  ``ResponseFragments`` out
- **Configuration**: ``build_config``/``load_config`` producing an immutable
  ``ListControlConfig``
- **Validation**: ``ValidationPipeline`` and built-in validators
- **Interaction model**: ``InteractionModelGenerator`` collecting the intents
  and vocabulary a control expects

Example:
    ```python
    from dialogknobs_controls import (
        ControlInput,
        MultiValueListControl,
        ParsedIntent,
        TurnRunner,
    )

    control = MultiValueListControl({
        "id": "toppings",
        "slot_type": "Topping",
        "list_item_ids": ["cheese", "ham", "olives"],
    })
    runner = TurnRunner(control)

    outcome = await runner.run(ControlInput())
    print(outcome.response.prompt)
    # What would you like? Some suggestions are cheese, ham or olives.

    outcome = await runner.run(ControlInput(
        intent=ParsedIntent.multi_value("Topping", ["ham"], action="builtin_add"),
    ))
    print(outcome.response.prompt)
    # Was that ham?
    ```
"""

from dialogknobs_controls.acts import (
    CONTENT_ACT_TYPES,
    INITIATIVE_ACT_TYPES,
    ConfirmValueAct,
    ContentAct,
    InitiativeAct,
    InvalidValueAct,
    RequestChangedValueByListAct,
    RequestValueByListAct,
    SemanticAct,
    SystemAct,
    UnusableInputValueAct,
    ValueChangedAct,
    ValueConfirmedAct,
    ValueDisconfirmedAct,
    ValueSetAct,
    is_initiative_act,
)
from dialogknobs_controls.config import (
    DEFAULTS,
    ListControlConfig,
    build_config,
    load_config,
)
from dialogknobs_controls.control import Control
from dialogknobs_controls.exceptions import (
    ConfigurationError,
    ContractViolationError,
    DialogControlError,
    HandlerStateMismatchError,
    InitiativeStateMismatchError,
    MissingPreviousValueError,
    UnhandledActError,
    UnknownElicitationModeError,
)
from dialogknobs_controls.guards import CustomHandler, Matched, Unmatched
from dialogknobs_controls.input import ControlInput, ParsedIntent, ResolvedValue
from dialogknobs_controls.interaction_model import (
    ControlIntentSpec,
    InteractionModelContributor,
    InteractionModelGenerator,
    SlotValue,
)
from dialogknobs_controls.list_control import MultiValueListControl
from dialogknobs_controls.pagination import PaginationTracker
from dialogknobs_controls.response import (
    ControlResponseBuilder,
    ResponseFragments,
    VisualDirective,
)
from dialogknobs_controls.results import ControlResultBuilder
from dialogknobs_controls.runner import TurnOutcome, TurnRunner
from dialogknobs_controls.state import LastInitiative, TurnState, ValueEntry
from dialogknobs_controls.strings import Action, ElicitationMode, Feedback, Target
from dialogknobs_controls.validation import (
    ValidationFailure,
    ValidationPipeline,
    max_values,
    no_duplicates,
    require_catalog_match,
)

__version__ = "0.1.0"

__all__ = [
    # Control
    "Control",
    "MultiValueListControl",
    "TurnRunner",
    "TurnOutcome",
    # Input
    "ControlInput",
    "ParsedIntent",
    "ResolvedValue",
    # Acts
    "SystemAct",
    "ValueSetAct",
    "ValueChangedAct",
    "ValueConfirmedAct",
    "ValueDisconfirmedAct",
    "InvalidValueAct",
    "UnusableInputValueAct",
    "ConfirmValueAct",
    "RequestValueByListAct",
    "RequestChangedValueByListAct",
    "ContentAct",
    "InitiativeAct",
    "SemanticAct",
    "CONTENT_ACT_TYPES",
    "INITIATIVE_ACT_TYPES",
    "is_initiative_act",
    # Results and response
    "ControlResultBuilder",
    "ControlResponseBuilder",
    "ResponseFragments",
    "VisualDirective",
    # State
    "TurnState",
    "ValueEntry",
    "LastInitiative",
    "PaginationTracker",
    # Configuration
    "DEFAULTS",
    "ListControlConfig",
    "build_config",
    "load_config",
    "CustomHandler",
    # Guards
    "Matched",
    "Unmatched",
    # Validation
    "ValidationFailure",
    "ValidationPipeline",
    "require_catalog_match",
    "max_values",
    "no_duplicates",
    # Vocabulary
    "Action",
    "Target",
    "Feedback",
    "ElicitationMode",
    # Interaction model
    "ControlIntentSpec",
    "InteractionModelGenerator",
    "InteractionModelContributor",
    "SlotValue",
    # Exceptions
    "DialogControlError",
    "ConfigurationError",
    "ContractViolationError",
    "HandlerStateMismatchError",
    "InitiativeStateMismatchError",
    "MissingPreviousValueError",
    "UnhandledActError",
    "UnknownElicitationModeError",
]

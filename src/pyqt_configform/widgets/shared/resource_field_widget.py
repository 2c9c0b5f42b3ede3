"""Closed-choice editor whose options come from a ResourceOptionResolver."""

import logging

from .resource_option_resolver import ResourceOptionResolver, ResolverState
from .value_widgets import OptionComboBox

logger = logging.getLogger(__name__)


class ResourceComboBox(OptionComboBox):
    """
    Combo box bound to a resolver.

    Disabled unless the resolver is READY (and the form itself is enabled);
    the placeholder tracks the resolver state.
    """

    LOADING_TEXT = "Loading..."
    NO_CONTEXT_TEXT = "No resource context available"

    def __init__(self, resolver: ResourceOptionResolver, placeholder: str = "",
                 form_disabled: bool = False, parent=None):
        super().__init__(parent)
        self.resolver = resolver
        self.field_placeholder = placeholder
        self.form_disabled = form_disabled
        resolver.state_changed.connect(self.sync_from_resolver)
        self.sync_from_resolver()

    def sync_from_resolver(self) -> None:
        state = self.resolver.state
        if state is ResolverState.NO_SCOPE:
            self.set_options([])
            self.setPlaceholderText(self.NO_CONTEXT_TEXT)
            self.setEnabled(False)
        elif state is ResolverState.LOADING:
            self.setPlaceholderText(self.LOADING_TEXT)
            self.setEnabled(False)
        else:
            self.set_options(self.resolver.options)
            self.setPlaceholderText(self.field_placeholder)
            self.setEnabled(not self.form_disabled)
        logger.debug(f"Resource combo synced: state={state.value}, options={self.count()}")

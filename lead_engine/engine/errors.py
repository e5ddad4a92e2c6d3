"""Exceptions raised by the lead intelligence engine."""


class LeadEngineError(Exception):
    """Base class for all engine errors."""


class CatalogError(LeadEngineError):
    """Raised when a template catalog file is malformed."""


class ProviderError(LeadEngineError):
    """Raised by a ProfileProvider when it cannot produce a profile."""


class UnknownProviderError(LeadEngineError):
    """Raised when no provider is registered under the requested name."""


class UnknownTemplateError(LeadEngineError):
    """Raised when a template id is not in the catalog."""
    def __init__(self, template_id):
        self.template_id = template_id
        super().__init__(f"Unknown template '{template_id}'")


class UnresolvedPlaceholderError(LeadEngineError):
    """Raised when placeholder tokens survive personalization."""
    def __init__(self, template_id, tokens):
        self.template_id = template_id
        self.tokens = sorted(set(tokens))
        super().__init__(
            f"Template '{template_id}' has unresolved placeholders: "
            + ', '.join('{%s}' % t for t in self.tokens)
        )

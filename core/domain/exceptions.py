"""Domain and application exceptions."""


class GrooveSyncError(Exception):
    """Base class for sync engine errors."""


class MalformedPayloadError(GrooveSyncError):
    """A webhook body is not JSON or lacks the event envelope fields."""


class EntityNotFoundError(GrooveSyncError):
    """A referenced mirror entity does not exist."""

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found: {entity_id}")


class CommerceClientNotConfiguredError(GrooveSyncError):
    """A pull was requested but no commerce client is configured."""


class SignatureVerificationError(GrooveSyncError):
    """A webhook delivery's signature is missing or does not match."""


class MissingSignatureKeyError(GrooveSyncError):
    """No signature key is configured for a webhook route."""

    def __init__(self, route: str):
        self.route = route
        super().__init__(f"No signature key configured for the {route} webhook")

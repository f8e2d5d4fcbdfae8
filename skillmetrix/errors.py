"""Error taxonomy shared by the store, the services and the routes."""


class SkillMetrixError(Exception):
    kind = 'internal'
    status_code = 500

    def __init__(self, message=None):
        super().__init__(message or self.kind)
        self.message = message or self.kind

    def to_dict(self):
        return {'kind': self.kind, 'message': self.message}


class ValidationError(SkillMetrixError):
    kind = 'validation'
    status_code = 400


class Unauthorized(SkillMetrixError):
    kind = 'unauthorized'
    status_code = 401


class Forbidden(SkillMetrixError):
    kind = 'forbidden'
    status_code = 403


class NotFound(SkillMetrixError):
    kind = 'not_found'
    status_code = 404


class StoreError(SkillMetrixError):
    """A storage backend failed; the surrounding unit of work was rolled back."""
    kind = 'internal'
    status_code = 500


class HistoryImmutableError(StoreError):
    """History rows are append-only."""


class EmailDeliveryError(Exception):
    pass

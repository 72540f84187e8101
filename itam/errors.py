# itam/errors.py

class AssetError(Exception):
    """Base for failures that map onto an HTTP error response."""
    status_code = 400
    message = 'Request failed'

    def __init__(self, message=None):
        super().__init__(message or self.message)
        self.message = message or self.message

    def to_dict(self):
        return {'error': self.message}

class ValidationError(AssetError):
    status_code = 400
    message = 'Invalid request'

class InvalidActor(AssetError):
    status_code = 400
    message = 'Performing user not found'

class InvalidAction(AssetError):
    status_code = 400
    message = 'Invalid action'

class NotFound(AssetError):
    status_code = 404
    message = 'Not found'

class ConcurrentModification(AssetError):
    status_code = 409
    message = 'Asset was modified by another request, reload and try again'

class ConfigurationMissing(AssetError):
    status_code = 500
    message = 'Required status labels are not configured'

class StoreWriteFailure(AssetError):
    status_code = 500
    message = 'Failed to save changes'

class ImmutableRecord(RuntimeError):
    """Raised when something tries to rewrite or delete an audit record."""

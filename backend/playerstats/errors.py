"""Error taxonomy shared by services and routes.

Each error knows the HTTP status it maps to; the app-level error handler
renders them as ``{'error': message, 'code': code}``.
"""


class PlayerStatsError(Exception):
    status_code = 400
    code = 'Error'
    default_message = 'Request failed'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationFailed(PlayerStatsError):
    code = 'ValidationFailed'
    default_message = 'Invalid input'


class DuplicateName(PlayerStatsError):
    code = 'DuplicateName'
    default_message = 'Name already taken'


class InvalidCredentials(PlayerStatsError):
    status_code = 401
    code = 'InvalidCredentials'
    default_message = 'Invalid name or secret'


class Unauthenticated(PlayerStatsError):
    status_code = 401
    code = 'Unauthenticated'
    default_message = 'Authentication required'


InvalidToken = Unauthenticated


class Forbidden(PlayerStatsError):
    status_code = 403
    code = 'Forbidden'
    default_message = 'Not allowed'


class NotFound(PlayerStatsError):
    status_code = 404
    code = 'NotFound'
    default_message = 'Player not found'


class InvalidOutcome(PlayerStatsError):
    code = 'InvalidOutcome'
    default_message = "Result must be one of 'win', 'loss', 'tie'"


class StorageFailure(PlayerStatsError):
    status_code = 500
    code = 'StorageFailure'
    default_message = 'Internal server error'

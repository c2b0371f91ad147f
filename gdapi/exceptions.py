from werkzeug.http import HTTP_STATUS_CODES

UNKNOWN_STATUS = -1


class APIException(Exception):
    """
    Base class for errors signaled by a :class:`gdapi.Client`.

    :param str message: error message
    :param int status: HTTP status, or ``-1`` when the error did not come from an HTTP response
    :param body: the (classified) response body or other error details

    .. attribute:: status_map

        A dictionary mapping HTTP statuses and error categories to exception classes. Use :meth:`register` to add
        custom subclasses.
    """
    status_map = {}

    def __init__(self, message=None, status=UNKNOWN_STATUS, body=None):
        if message is None:
            message = HTTP_STATUS_CODES.get(status, '')
        super(APIException, self).__init__(message)
        self.message = message
        self.status = status
        self.body = body

    @property
    def status_code(self):
        return self.status

    def as_dict(self):
        return {
            'status': self.status,
            'message': self.message
        }

    @classmethod
    def register(cls, *statuses):
        """
        Class decorator registering an exception class for one or more HTTP statuses or error categories::

            @APIException.register(429)
            class TooManyRequests(APIException):
                pass
        """
        def decorator(exception_class):
            for status in statuses:
                cls.status_map[status] = exception_class
            return exception_class

        return decorator

    def __repr__(self):
        return '<{} {} {!r}>'.format(self.__class__.__name__, self.status, self.message)


class InvalidResponse(APIException):
    pass


@APIException.register('schema')
class SchemaError(APIException):
    pass


@APIException.register('version')
class VersionRequired(SchemaError):
    pass


@APIException.register('type')
class TypeNotFound(APIException):
    pass


@APIException.register(400)
class BadRequest(APIException):
    pass


@APIException.register(401)
class Unauthorized(APIException):
    pass


@APIException.register(403)
class Forbidden(APIException):
    pass


@APIException.register(404)
class NotFound(APIException):
    pass


@APIException.register(405)
class MethodNotAllowed(APIException):
    pass


@APIException.register(409)
class Conflict(APIException):
    pass


@APIException.register(422)
class UnprocessableEntity(APIException):
    pass


@APIException.register(500)
class ServerError(APIException):
    pass

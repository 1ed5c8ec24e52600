from .errors import RecordNotFound  # noqa

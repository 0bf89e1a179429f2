from flask import jsonify
from pydantic import ValidationError

STATUS_BY_CODE = {
    'invalid-argument': 400,
    'unauthenticated': 401,
    'permission-denied': 403,
    'not-found': 404,
    'internal': 500,
}


class ApiError(Exception):
    """Error surfaced to the client as ``{"error": message, "code": code}``."""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code if code in STATUS_BY_CODE else 'internal'
        self.message = message

    @property
    def status(self) -> int:
        return STATUS_BY_CODE[self.code]

    def to_dict(self) -> dict:
        return {'error': self.message, 'code': self.code}


def _describe(exc: ValidationError) -> str:
    first = exc.errors()[0]
    where = '.'.join(str(part) for part in first.get('loc', ())) or 'body'
    return f"{where}: {first.get('msg', 'invalid value')}"


def parse_payload(schema, data):
    """Validate ``data`` against a pydantic model or raise invalid-argument."""
    try:
        return schema.model_validate(data if data is not None else {})
    except ValidationError as exc:
        raise ApiError('invalid-argument', _describe(exc)) from exc


def register_error_handlers(flask_app) -> None:
    @flask_app.errorhandler(ApiError)
    def handle_api_error(err: ApiError):
        return jsonify(err.to_dict()), err.status

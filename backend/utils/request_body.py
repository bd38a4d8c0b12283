from flask import request
from werkzeug.exceptions import BadRequest


def json_object():
    """The request's JSON body as a dict.

    A missing or unparsable body reads as ``{}`` so field checks report what
    is missing. Any other JSON value (a list, a number) is a 400.
    """
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise BadRequest("Request body must be a JSON object")
    return data

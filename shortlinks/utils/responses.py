"""API Gateway Lambda proxy responses.

Functions:
    response_json(status_code, body) -> LambdaResponse
    response_error(error) -> LambdaResponse
        Map a ShortLinksError to its HTTP status with a {message, error_code} body.
    response_302(location) -> LambdaResponse
"""

import json
from typing import Any

from shortlinks.exceptions import ShortLinksError
from shortlinks.types import LambdaResponse


CORS_HEADERS = {
    'Content-Type': 'application/json',
    # TODO: restrict to the frontend domain once it is deployed
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Headers': 'Authorization,Content-Type',
    'Access-Control-Allow-Methods': 'OPTIONS,POST,GET',
}


def response_json(status_code: int, body: dict[str, Any] | list[Any]) -> LambdaResponse:
    return {
        'statusCode': status_code,
        'headers': dict(CORS_HEADERS),
        'body': json.dumps(body),
    }


def response_error(error: ShortLinksError) -> LambdaResponse:
    """Respond with the error's status code

    Server errors (5xx) carry no internal detail in their message.
    """
    if error.status_code >= 500:
        message = 'Internal Server Error'
    else:
        message = str(error) or type(error).__name__
    return response_json(error.status_code, {'message': message, 'error_code': error.error_code})


def response_302(*, location: str) -> LambdaResponse:
    return {
        'statusCode': 302,
        'headers': {
            'Location': location,
            'Cache-Control': 'no-store',
            'Access-Control-Allow-Origin': CORS_HEADERS['Access-Control-Allow-Origin'],
        },
        'body': json.dumps({}),  # no body needed for redirects
    }

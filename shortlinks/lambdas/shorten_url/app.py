import json
import logging

from shortlinks.types import LambdaEvent, LambdaContext, LambdaResponse
from shortlinks.dao.redis import UrlRecordRedisDAO
from shortlinks.exceptions import ShortLinksError, UnauthenticatedError
from shortlinks.services import ResolutionService
from shortlinks.utils import load_config, app_prefix, base_url, owner_id, ServiceSettings
from shortlinks.utils.helpers import guarantee_500_response
from shortlinks.utils.responses import response_json, response_error
from shortlinks.lambdas.shorten_url.constants import (
    MISSING_USER_ID,
    INVALID_JSON,
    MISSING_ORIGINAL_URL,
    SHORT_URL_CREATED,
    SHORT_URL_ALREADY_EXISTS,
    SHORTEN_URL_REJECTED,
)


logger = logging.getLogger(__name__)


def response_400(message: str, error_code: str) -> LambdaResponse:
    return response_json(400, {'message': f'Bad Request ({message})', 'error_code': error_code})


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to shorten URLs

    This Lambda handler follows this procedure to shorten URLs:
    - Step 1: Extract Amazon Cognito user id from Lambda event
    - Step 2: Extract original URL, custom alias and expiry from request body
    - Step 3: Create the short URL (or reuse the owner's existing one)
    - Step 4: Respond with 201 (created) or 200 (already shortened)

    Request body (JSON):
        original_url | originalUrl:     destination URL (required)
        custom_alias | customAlias:     user chosen identifier (optional)
        expires_in_days | expiresIn:    lifetime in days (optional)

    HTTP responses:
        201: Short URL created
        200: Owner already shortened this URL (existing short URL returned)
        400: Bad client request (invalid JSON, URL, alias or expiry)
        401: Missing Cognito user id
        409: Custom alias already taken
        500: Internal server error

    Args:
        event (LambdaEvent):
            API Gateway event payload in Lambda Proxy format.
        context (LambdaContext):
            AWS Lambda context object containing runtime information.

    Returns:
        LambdaResponse:
            API Gateway-compatible response including statusCode, headers, and body.

    Example:
        >>> event = {'body': '{"original_url": "https://example.com"}', 'requestContext': {...}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        201
        >>> json.loads(response['body'])['short_url']
        'https://sho.rt/Gh71TCN'
    """
    # 0- Get application's config
    app_config = load_config('shorten_url')
    logger.debug('Assuming Redis as the backend database for URL records')
    redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}
    settings = ServiceSettings.from_config(app_config.get('service'), fallback_base_url=base_url(event))

    # 1- Extract user id from Cognito
    user_id = owner_id(event)
    if user_id is None:
        logger.info("Missing 'sub' in JWT claims. Responding with 401.", extra={'event': MISSING_USER_ID})
        return response_error(UnauthenticatedError("Unauthorized (missing 'sub' in JWT claims)"))

    # 2- Extract original URL and options from request body
    try:
        request_body = json.loads(event.get('body') or '{}')
    except json.JSONDecodeError:
        logger.info('Invalid JSON body. Responding with 400.', extra={'event': INVALID_JSON})
        return response_400('invalid JSON body', error_code=INVALID_JSON)
    if not isinstance(request_body, dict):
        logger.info('JSON body is not an object. Responding with 400.', extra={'event': INVALID_JSON})
        return response_400('JSON body must be an object', error_code=INVALID_JSON)

    original_url = request_body.get('original_url') or request_body.get('originalUrl')
    if not original_url:
        logger.info('Missing original URL in JSON body. Responding with 400.', extra={'event': MISSING_ORIGINAL_URL})
        return response_400("missing 'original_url' or 'originalUrl' in JSON body", error_code=MISSING_ORIGINAL_URL)
    custom_alias = request_body.get('custom_alias') or request_body.get('customAlias')
    expires_in_days = request_body.get('expires_in_days', request_body.get('expiresIn'))

    # 3- Create the short URL
    service = ResolutionService(UrlRecordRedisDAO(**redis_config, prefix=app_prefix()), settings=settings)
    try:
        created = service.create_short_url(
            owner_id=user_id,
            original_url=original_url,
            custom_alias=custom_alias,
            expires_in_days=expires_in_days,
        )
    except ShortLinksError as e:
        logger.info(
            'Short URL creation rejected. Responding with %s.',
            e.status_code,
            extra={'event': SHORTEN_URL_REJECTED, 'errorCode': e.error_code, 'reason': str(e)},
        )
        return response_error(e)

    # 4- Respond with the short URL
    if not created.created:
        logger.info(
            'URL already shortened by user. Responding with 200.',
            extra={'shortcode': created.short_code, 'event': SHORT_URL_ALREADY_EXISTS},
        )
        return response_json(200, {'message': 'URL already shortened', **created.to_dict()})

    logger.info(
        'Short URL created. Responding with 201.',
        extra={'shortcode': created.short_code, 'event': SHORT_URL_CREATED},
    )
    return response_json(201, {'message': f'Successfully shortened {created.original_url} to {created.short_url}', **created.to_dict()})

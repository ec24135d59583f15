import logging

from shortlinks.types import LambdaEvent, LambdaContext, LambdaResponse
from shortlinks.dao.redis import UrlRecordRedisDAO
from shortlinks.exceptions import ShortLinksError, UnauthenticatedError, ValidationError
from shortlinks.services import ResolutionService
from shortlinks.utils import load_config, app_prefix, base_url, owner_id, ServiceSettings
from shortlinks.utils.helpers import guarantee_500_response
from shortlinks.utils.responses import response_json, response_error
from shortlinks.lambdas.url_analytics.constants import (
    MISSING_USER_ID,
    MISSING_SHORTCODE,
    INVALID_WINDOW_DAYS,
    ANALYTICS_REJECTED,
    ANALYTICS_SUCCESS,
    URL_INFO_SUCCESS,
)


logger = logging.getLogger(__name__)


def window_days(event: LambdaEvent) -> int | None:
    """Parse the optional `window_days` query string parameter

    Raises:
        ValidationError: If the value isn't a positive whole number.
    """
    raw = (event.get('queryStringParameters') or {}).get('window_days')
    if raw is None:
        return None
    try:
        days = int(raw)
    except ValueError as e:
        raise ValidationError('window_days must be a positive whole number') from e
    if days < 1:
        raise ValidationError('window_days must be a positive whole number')
    return days


def wants_analytics(event: LambdaEvent) -> bool:
    route = event.get('resource') or event.get('path') or ''
    return route.rstrip('/').endswith('/analytics')


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle owner-only requests about a single short URL

    Routes:
        GET /api/urls/{shortcode}               -> URL summary
        GET /api/urls/{shortcode}/analytics     -> country, device and daily visit breakdown

    This Lambda handler follows this procedure:
    - Step 1: Extract Amazon Cognito user id from Lambda event
    - Step 2: Extract shortcode (and timeline window) from the request
    - Step 3: Load the record, checking the caller owns it
    - Step 4: Respond with the summary or analytics

    HTTP responses:
        200: Summary / analytics
        400: Missing shortcode or malformed window_days
        401: Missing Cognito user id
        403: Caller doesn't own the short URL
        404: Unknown shortcode
        500: Internal server error
    """
    # 0- Get application's config
    app_config = load_config('url_analytics')
    redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}
    settings = ServiceSettings.from_config(app_config.get('service'), fallback_base_url=base_url(event))

    # 1- Extract user id from Cognito
    user_id = owner_id(event)
    if user_id is None:
        logger.info("Missing 'sub' in JWT claims. Responding with 401.", extra={'event': MISSING_USER_ID})
        return response_error(UnauthenticatedError("Unauthorized (missing 'sub' in JWT claims)"))

    # 2- Extract shortcode and timeline window
    shortcode = (event.get('pathParameters') or {}).get('shortcode')
    if not shortcode:
        logger.info('Missing "shortcode" in path. Responding with 400.', extra={'event': MISSING_SHORTCODE})
        return response_json(400, {'message': "Bad Request (missing 'shortcode' in path)", 'error_code': MISSING_SHORTCODE})
    try:
        days = window_days(event)
    except ValidationError as e:
        logger.info('Invalid window_days. Responding with 400.', extra={'event': INVALID_WINDOW_DAYS})
        return response_error(e)

    # 3- Load the owned record
    service = ResolutionService(UrlRecordRedisDAO(**redis_config, prefix=app_prefix()), settings=settings)
    try:
        if wants_analytics(event):
            result = service.get_analytics(user_id, shortcode, window_days=days)
            outcome = ANALYTICS_SUCCESS
        else:
            result = service.get_url_info(user_id, shortcode)
            outcome = URL_INFO_SUCCESS
    except ShortLinksError as e:
        logger.info(
            'Analytics request rejected. Responding with %s.',
            e.status_code,
            extra={'shortcode': shortcode, 'event': ANALYTICS_REJECTED, 'errorCode': e.error_code},
        )
        return response_error(e)

    # 4- Respond with the summary or analytics
    logger.info('Responding with 200.', extra={'shortcode': shortcode, 'event': outcome})
    return response_json(200, result.to_dict())

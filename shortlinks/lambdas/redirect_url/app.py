import logging

from shortlinks.types import LambdaEvent, LambdaContext, LambdaResponse
from shortlinks.dao.redis import UrlRecordRedisDAO
from shortlinks.exceptions import ShortLinksError, NotFoundError, ExpiredError
from shortlinks.services import ResolutionService, VisitRecorder
from shortlinks.utils import load_config, app_prefix, base_url, get_short_url, client_ip, user_agent, ServiceSettings, IpApiGeoLookup
from shortlinks.utils.helpers import guarantee_500_response
from shortlinks.utils.responses import response_json, response_error, response_302
from shortlinks.lambdas.redirect_url.constants import (
    MISSING_SHORTCODE,
    SHORT_URL_NOT_FOUND,
    SHORT_URL_EXPIRED,
    REDIRECT_FAILED,
    REDIRECT_SUCCESS,
)


logger = logging.getLogger(__name__)

# Shared across warm invocations so the per-IP cache survives
GEO_LOOKUP = IpApiGeoLookup()


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to redirect URLs

    This Lambda handler follows this procedure to redirect URLs:
    - Step 1: Extract shortcode (or custom alias) from request path
    - Step 2: Resolve it to an active URL record
    - Step 3: Record the visit (best-effort, never fails the redirect)
    - Step 4: Redirect client to the original URL

    HTTP responses:
        302: Successful redirect
            headers:
                Location: original URL
        400: Missing shortcode in path parameters
        404: Unknown shortcode
        410: Expired short URL
        500: Internal server error

    Args:
        event (LambdaEvent):
            API Gateway event payload containing the shortcode path parameter.
        context (LambdaContext):
            AWS Lambda runtime context object (not used directly).

    Returns:
        LambdaResponse:
            API Gateway-compatible response including statusCode, headers, and body.

    Example:
        >>> event = {'pathParameters': {'shortcode': 'Gh71TCN'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        302
        >>> response['headers']['Location']
        'https://example.com/my-page'
    """
    # 0- Get application's config
    app_config = load_config('redirect_url')
    logger.debug('Assuming Redis as the backend database for URL records')
    redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}
    settings = ServiceSettings.from_config(app_config.get('service'), fallback_base_url=base_url(event))

    # 1- Extract shortcode from request's path
    shortcode = (event.get('pathParameters') or {}).get('shortcode')
    if not shortcode:
        logger.info('Missing "shortcode" in path. Responding with 400.', extra={'event': MISSING_SHORTCODE})
        return response_json(400, {'message': "Bad Request (missing 'shortcode' in path)", 'error_code': MISSING_SHORTCODE})
    short_url = get_short_url(shortcode, settings.base_url)
    logger.debug('Client requested short URL %s.', short_url)

    dao = UrlRecordRedisDAO(**redis_config, prefix=app_prefix())
    recorder = VisitRecorder(
        dao,
        geo=GEO_LOOKUP if settings.geo_lookup_enabled else None,
        fallback_country=settings.geo_fallback_country,
        max_attempts=settings.recording_attempts,
    )
    service = ResolutionService(dao, recorder=recorder, settings=settings)

    # 2- Resolve the short URL and 3- record the visit
    try:
        location = service.redirect(shortcode, ip=client_ip(event), user_agent=user_agent(event))
    except NotFoundError as e:
        logger.info(
            'URL record not found in database. Responding with 404.',
            extra={'shortcode': shortcode, 'event': SHORT_URL_NOT_FOUND},
        )
        return response_error(e)
    except ExpiredError as e:
        logger.info(
            'Short URL has expired. Responding with 410.',
            extra={'shortcode': shortcode, 'event': SHORT_URL_EXPIRED},
        )
        return response_error(e)
    except ShortLinksError as e:
        logger.error(
            'Failed to resolve short URL. Responding with %s.',
            e.status_code,
            extra={'shortcode': shortcode, 'event': REDIRECT_FAILED, 'errorCode': e.error_code},
        )
        return response_error(e)

    # 4- Redirect client to original URL
    logger.info(
        'Redirecting client to original URL. Responding with 302.',
        extra={'shortcode': shortcode, 'event': REDIRECT_SUCCESS},
    )
    return response_302(location=location)

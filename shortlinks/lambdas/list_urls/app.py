import logging

from shortlinks.types import LambdaEvent, LambdaContext, LambdaResponse
from shortlinks.dao.redis import UrlRecordRedisDAO
from shortlinks.exceptions import ShortLinksError, UnauthenticatedError
from shortlinks.services import ResolutionService
from shortlinks.utils import load_config, app_prefix, base_url, owner_id, ServiceSettings
from shortlinks.utils.helpers import guarantee_500_response
from shortlinks.utils.responses import response_json, response_error


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """List the caller's short URLs, newest first

    HTTP responses:
        200: {"urls": [UrlSummary, ...]}
        401: Missing Cognito user id
        500: Internal server error
    """
    # 0- Get application's config
    app_config = load_config('list_urls')
    redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}
    settings = ServiceSettings.from_config(app_config.get('service'), fallback_base_url=base_url(event))

    # 1- Extract user id from Cognito
    user_id = owner_id(event)
    if user_id is None:
        logger.info("Missing 'sub' in JWT claims. Responding with 401.", extra={'event': 'MISSING_USER_ID'})
        return response_error(UnauthenticatedError("Unauthorized (missing 'sub' in JWT claims)"))

    # 2- List the owner's short URLs
    service = ResolutionService(UrlRecordRedisDAO(**redis_config, prefix=app_prefix()), settings=settings)
    try:
        urls = service.list_owner_urls(user_id)
    except ShortLinksError as e:
        logger.error('Failed to list short URLs. Responding with %s.', e.status_code, extra={'event': 'LIST_URLS_FAILED'})
        return response_error(e)

    logger.info('Listed short URLs. Responding with 200.', extra={'count': len(urls), 'event': 'LIST_URLS_SUCCESS'})
    return response_json(200, {'urls': [url.to_dict() for url in urls]})

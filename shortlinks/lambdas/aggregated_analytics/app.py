import logging

from shortlinks.types import LambdaEvent, LambdaContext, LambdaResponse
from shortlinks.dao.redis import UrlRecordRedisDAO
from shortlinks.exceptions import ShortLinksError, UnauthenticatedError
from shortlinks.services import ResolutionService
from shortlinks.utils import load_config, app_prefix, owner_id, ServiceSettings
from shortlinks.utils.helpers import guarantee_500_response
from shortlinks.utils.responses import response_json, response_error


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Country and device histograms summed over all of the caller's short URLs

    HTTP responses:
        200: {"country_histogram": {...}, "device_histogram": {...}}
        401: Missing Cognito user id
        500: Internal server error
    """
    # 0- Get application's config
    app_config = load_config('aggregated_analytics')
    redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}
    settings = ServiceSettings.from_config(app_config.get('service'))

    # 1- Extract user id from Cognito
    user_id = owner_id(event)
    if user_id is None:
        logger.info("Missing 'sub' in JWT claims. Responding with 401.", extra={'event': 'MISSING_USER_ID'})
        return response_error(UnauthenticatedError("Unauthorized (missing 'sub' in JWT claims)"))

    # 2- Aggregate analytics across the owner's records
    service = ResolutionService(UrlRecordRedisDAO(**redis_config, prefix=app_prefix()), settings=settings)
    try:
        analytics = service.get_aggregated_analytics(user_id)
    except ShortLinksError as e:
        logger.error('Failed to aggregate analytics. Responding with %s.', e.status_code, extra={'event': 'AGGREGATED_ANALYTICS_FAILED'})
        return response_error(e)

    logger.info('Aggregated analytics. Responding with 200.', extra={'event': 'AGGREGATED_ANALYTICS_SUCCESS'})
    return response_json(200, analytics.to_dict())

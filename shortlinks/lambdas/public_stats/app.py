import logging

from shortlinks.types import LambdaEvent, LambdaContext, LambdaResponse
from shortlinks.dao.redis import UrlRecordRedisDAO
from shortlinks.exceptions import ShortLinksError
from shortlinks.services import ResolutionService
from shortlinks.utils import load_config, app_prefix
from shortlinks.utils.helpers import guarantee_500_response
from shortlinks.utils.responses import response_json, response_error


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Public counters: short URLs created and clicks tracked

    HTTP responses:
        200: {"urls_created": int, "clicks_tracked": int}
        500: Internal server error
    """
    app_config = load_config('public_stats')
    redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}

    service = ResolutionService(UrlRecordRedisDAO(**redis_config, prefix=app_prefix()))
    try:
        stats = service.get_public_stats()
    except ShortLinksError as e:
        logger.error('Failed to read public stats. Responding with %s.', e.status_code, extra={'event': 'PUBLIC_STATS_FAILED'})
        return response_error(e)

    logger.info('Read public stats. Responding with 200.', extra={'event': 'PUBLIC_STATS_SUCCESS'})
    return response_json(200, stats.to_dict())

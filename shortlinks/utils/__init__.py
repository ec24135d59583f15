from shortlinks.utils.config import app_env, app_name, project_root, app_prefix, load_config, ServiceSettings
from shortlinks.utils.helpers import base_url, get_short_url, owner_id, client_ip, user_agent, require_environment
from shortlinks.utils.shortener import generate_shortcode, validate_alias, normalize_alias
from shortlinks.utils.validators import validate_url, validate_expiry_days
from shortlinks.utils.useragent import classify_device
from shortlinks.utils.geo import GeoLookup, IpApiGeoLookup, resolve_country
from shortlinks.utils.logging import initialize_logging


__all__ = [
    'generate_shortcode',
    'validate_alias',
    'normalize_alias',
    'validate_url',
    'validate_expiry_days',
    'classify_device',
    'GeoLookup',
    'IpApiGeoLookup',
    'resolve_country',
    'app_env',
    'app_name',
    'app_prefix',
    'project_root',
    'load_config',
    'ServiceSettings',
    'base_url',
    'get_short_url',
    'owner_id',
    'client_ip',
    'user_agent',
    'require_environment',
    'initialize_logging',
]

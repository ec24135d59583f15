# Log event / error codes
MISSING_USER_ID = 'MISSING_USER_ID'
MISSING_SHORTCODE = 'MISSING_SHORTCODE'
INVALID_WINDOW_DAYS = 'INVALID_WINDOW_DAYS'
ANALYTICS_REJECTED = 'ANALYTICS_REJECTED'
ANALYTICS_SUCCESS = 'ANALYTICS_SUCCESS'
URL_INFO_SUCCESS = 'URL_INFO_SUCCESS'
